"""
Operation List
==============
Typed representation of a compiled MDL script.

Each opcode gets its own frozen dataclass carrying only the operands that
opcode needs. The parser produces a tuple of these and nothing downstream
rewrites it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import ClassVar, Optional, Union

Vector3 = tuple[float, float, float]


class OpCode(StrEnum):
    PUSH = "push"
    POP = "pop"
    MOVE = "move"
    SCALE = "scale"
    ROTATE = "rotate"
    BOX = "box"
    SPHERE = "sphere"
    TORUS = "torus"
    LINE = "line"
    SAVE = "save"
    DISPLAY = "display"
    FRAMES = "frames"
    BASENAME = "basename"
    VARY = "vary"


class Axis(IntEnum):
    """Rotation axis selector, numbered the way scripts encode it."""
    X = 0
    Y = 1
    Z = 2


@dataclass(frozen=True)
class PushOp:
    opcode: ClassVar[OpCode] = OpCode.PUSH


@dataclass(frozen=True)
class PopOp:
    opcode: ClassVar[OpCode] = OpCode.POP


@dataclass(frozen=True)
class MoveOp:
    offset: Vector3
    knob: Optional[str] = None
    opcode: ClassVar[OpCode] = OpCode.MOVE


@dataclass(frozen=True)
class ScaleOp:
    factors: Vector3
    knob: Optional[str] = None
    opcode: ClassVar[OpCode] = OpCode.SCALE


@dataclass(frozen=True)
class RotateOp:
    axis: Axis
    degrees: float
    knob: Optional[str] = None
    opcode: ClassVar[OpCode] = OpCode.ROTATE


@dataclass(frozen=True)
class BoxOp:
    """
    Axis aligned box.

    ``corner`` is the front-top-left corner and ``size`` holds
    (width, height, depth); the opposite corner is
    (x + width, y - height, z - depth).
    """
    corner: Vector3
    size: Vector3
    opcode: ClassVar[OpCode] = OpCode.BOX

    @property
    def opposite_corner(self) -> Vector3:
        x, y, z = self.corner
        w, h, d = self.size
        return (x + w, y - h, z - d)


@dataclass(frozen=True)
class SphereOp:
    center: Vector3
    radius: float
    opcode: ClassVar[OpCode] = OpCode.SPHERE


@dataclass(frozen=True)
class TorusOp:
    """Torus around the y axis: ``r0`` is the tube radius, ``r1`` the ring radius."""
    center: Vector3
    r0: float
    r1: float
    opcode: ClassVar[OpCode] = OpCode.TORUS


@dataclass(frozen=True)
class LineOp:
    p0: Vector3
    p1: Vector3
    opcode: ClassVar[OpCode] = OpCode.LINE


@dataclass(frozen=True)
class SaveOp:
    filename: str
    opcode: ClassVar[OpCode] = OpCode.SAVE


@dataclass(frozen=True)
class DisplayOp:
    opcode: ClassVar[OpCode] = OpCode.DISPLAY


@dataclass(frozen=True)
class FramesOp:
    count: int
    opcode: ClassVar[OpCode] = OpCode.FRAMES


@dataclass(frozen=True)
class BasenameOp:
    name: str
    opcode: ClassVar[OpCode] = OpCode.BASENAME


@dataclass(frozen=True)
class VaryOp:
    """Linear ramp of ``knob`` from ``start_value`` to ``end_value`` over a frame range (inclusive)."""
    knob: str
    start_frame: int
    end_frame: int
    start_value: float
    end_value: float
    opcode: ClassVar[OpCode] = OpCode.VARY


Operation = Union[
    PushOp, PopOp, MoveOp, ScaleOp, RotateOp,
    BoxOp, SphereOp, TorusOp, LineOp,
    SaveOp, DisplayOp, FramesOp, BasenameOp, VaryOp,
]
OperationList = tuple[Operation, ...]
