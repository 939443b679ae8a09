"""
mdlanim: interpreter and animator for MDL scene-description scripts.
"""
from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("mdlanim")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
