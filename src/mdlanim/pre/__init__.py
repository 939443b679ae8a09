"""
Compile-time stages: script parsing and the two passes that run before
the first frame is rendered.
"""
from mdlanim.pre.keyframes import build_keyframes
from mdlanim.pre.parser import ParsedScript, parse, parse_file
from mdlanim.pre.scan import scan_directives
