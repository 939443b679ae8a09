"""
The MODEL layer contains pure data structures.
It has NO knowledge of rendering or file output.
It deals with Operations, Knobs and Animation metadata.
"""
from mdlanim.model.animation import AnimationMetadata, KeyframeTable
from mdlanim.model.operations import (
    Axis,
    BasenameOp,
    BoxOp,
    DisplayOp,
    FramesOp,
    LineOp,
    MoveOp,
    OpCode,
    Operation,
    OperationList,
    PopOp,
    PushOp,
    RotateOp,
    SaveOp,
    ScaleOp,
    SphereOp,
    TorusOp,
    VaryOp,
)
from mdlanim.model.symbols import SymbolTable
