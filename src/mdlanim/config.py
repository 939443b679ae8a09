"""
Configuration & Path Management
===============================
This module serves as the central registry for output paths, screen
geometry and the default lighting of a render.

Why is this file needed?
------------------------
1. Abstraction: It keeps file locations (the frame directory, bundled sample
   scripts) out of the engine code.
2. Reproducibility: Every value that influences the pixels of a frame is
   gathered in ``RenderSettings`` so a run can be repeated exactly.

Exports:
    ASSETS_PATH (str): Absolute path to the bundled sample scripts.
    DEFAULT_ANIM_DIR (str): Directory that receives animation frames.
    RenderSettings: Screen size, tessellation step, colours and lighting.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to a resource shipped next to the source tree.
    """
    # config.py is in src/mdlanim/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")

DEFAULT_BASENAME: str = "basename"
DEFAULT_ANIM_DIR: str = "anim"
FRAME_INDEX_MIN_DIGITS: int = 3
FRAME_EXTENSION: str = ".png"
ANIMATION_EXTENSION: str = ".gif"
ANIMATION_FRAME_DURATION_MS: int = 20

XRES: int = 500
YRES: int = 500
STEP_3D: int = 20

Color = tuple[int, int, int]
Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class Lighting:
    """Parameters of the flat Phong model used for solids."""
    ambient: Color = (50, 50, 50)
    light_position: Vector3 = (0.5, 0.75, 1.0)
    light_color: Color = (0, 255, 255)
    view: Vector3 = (0.0, 0.0, 1.0)
    ambient_reflect: Vector3 = (0.1, 0.1, 0.1)
    diffuse_reflect: Vector3 = (0.5, 0.5, 0.5)
    specular_reflect: Vector3 = (0.5, 0.5, 0.5)
    specular_exponent: int = 8


@dataclass(frozen=True)
class RenderSettings:
    """Everything a frame needs besides the script itself."""
    width: int = XRES
    height: int = YRES
    step: int = STEP_3D
    background: Color = (255, 255, 255)
    line_color: Color = (0, 0, 0)
    lighting: Lighting = field(default_factory=Lighting)
    frame_duration_ms: int = ANIMATION_FRAME_DURATION_MS
