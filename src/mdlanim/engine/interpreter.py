"""
MDL Interpreter Engine
======================
Runs a compiled script and produces its images.

Why is this file needed?
------------------------
1. Passes: It runs the directive pre-scan and the keyframe pass before any
   drawing happens, so a misconfigured animation fails without output.
2. Frame Loop: For every frame it publishes that frame's knob values, walks
   the operation list once and exports the finished picture.
3. Sequencing: Between frames it resets the coordinate-system stack and
   the render target; after the last frame it assembles the animation.

Note: This module does no pixel work itself; drawing and file output go
through graphics.draw and IOManager.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from mdlanim import config
from mdlanim.config import RenderSettings
from mdlanim.errors import InvalidOperandError
from mdlanim.graphics import draw, primitives
from mdlanim.graphics.draw import RenderTarget
from mdlanim.graphics.matrix import make_rotation, make_scale, make_translation
from mdlanim.graphics.stack import TransformStack
from mdlanim.io import IOManager
from mdlanim.model.operations import OpCode
from mdlanim.pre.keyframes import build_keyframes
from mdlanim.pre.scan import scan_directives

if TYPE_CHECKING:
    from mdlanim.model.animation import AnimationMetadata, KeyframeTable
    from mdlanim.model.operations import (
        BoxOp,
        LineOp,
        MoveOp,
        Operation,
        OperationList,
        RotateOp,
        SaveOp,
        ScaleOp,
        SphereOp,
        TorusOp,
    )
    from mdlanim.model.symbols import SymbolTable

logger = logging.getLogger(__name__)


@dataclass
class RenderReport:
    """What a run wrote to disk."""
    frame_count: int
    basename: str
    frame_paths: list[str] = field(default_factory=list)
    saved_paths: list[str] = field(default_factory=list)
    animation_path: Optional[str] = None


class FrameInterpreter:
    """
    Executes the operation list against one coordinate-system stack and
    one render target.

    Shape operations only read the top of the stack; push, pop, move,
    scale and rotate are the only operations that change it.
    """

    def __init__(
        self,
        operations: OperationList,
        symbols: SymbolTable,
        settings: RenderSettings,
        target: RenderTarget,
        io: type[IOManager] = IOManager
    ) -> None:
        self.operations = operations
        self.symbols = symbols
        self.settings = settings
        self.target = target
        self.io = io
        self.stack = TransformStack()
        self.saved_paths: list[str] = []

        self._handlers: dict[OpCode, Callable[[Operation], None]] = {
            OpCode.PUSH: self._push,
            OpCode.POP: self._pop,
            OpCode.MOVE: self._move,
            OpCode.SCALE: self._scale,
            OpCode.ROTATE: self._rotate,
            OpCode.BOX: self._box,
            OpCode.SPHERE: self._sphere,
            OpCode.TORUS: self._torus,
            OpCode.LINE: self._line,
            OpCode.SAVE: self._save,
            OpCode.DISPLAY: self._display,
        }

    def apply_bindings(self, bindings: dict[str, float]) -> None:
        """Publish one frame's knob values to the symbol table."""
        for name, value in bindings.items():
            self.symbols.set(name, value)

    def execute(self) -> None:
        """Walk the operation list once, in order."""
        for op in self.operations:
            handler = self._handlers.get(op.opcode)
            # frames, basename and vary were consumed by the pre-passes
            if handler is not None:
                handler(op)

    def reset(self) -> None:
        """Fresh stack and cleared buffers for the next frame."""
        self.stack.reset()
        self.target.clear_color()
        self.target.clear_depth()

    def resolve(self, values: tuple[float, ...], knob: Optional[str]) -> tuple[float, ...]:
        """Literal operands, scaled by the knob's current value when one is named."""
        if knob is None:
            return values
        factor = self.symbols.lookup(knob)
        return tuple(v * factor for v in values)

    # --- COORDINATE SYSTEMS ---

    def _push(self, op: Operation) -> None:
        self.stack.push()

    def _pop(self, op: Operation) -> None:
        self.stack.pop()

    def _move(self, op: MoveOp) -> None:
        x, y, z = self.resolve(op.offset, op.knob)
        logger.debug(f"Move: {x:6.2f} {y:6.2f} {z:6.2f}" + (f"\tknob: {op.knob}" if op.knob else ""))
        self.stack.apply(make_translation(x, y, z))

    def _scale(self, op: ScaleOp) -> None:
        x, y, z = self.resolve(op.factors, op.knob)
        logger.debug(f"Scale: {x:6.2f} {y:6.2f} {z:6.2f}" + (f"\tknob: {op.knob}" if op.knob else ""))
        self.stack.apply(make_scale(x, y, z))

    def _rotate(self, op: RotateOp) -> None:
        (degrees,) = self.resolve((op.degrees,), op.knob)
        logger.debug(f"Rotate: axis: {op.axis.name} degrees: {degrees:6.2f}" + (f"\tknob: {op.knob}" if op.knob else ""))
        self.stack.apply(make_rotation(op.axis, math.radians(degrees)))

    # --- SHAPES ---

    def _draw_solid(self, geometry: primitives.PolygonMatrix) -> None:
        points = geometry.transformed(self.stack.top())
        draw.draw_polygons(points, self.target, self.settings.lighting)

    def _box(self, op: BoxOp) -> None:
        self._draw_solid(primitives.generate_box(op.corner, op.size))

    def _sphere(self, op: SphereOp) -> None:
        self._draw_solid(primitives.generate_sphere(op.center, op.radius, self.settings.step))

    def _torus(self, op: TorusOp) -> None:
        self._draw_solid(primitives.generate_torus(op.center, op.r0, op.r1, self.settings.step))

    def _line(self, op: LineOp) -> None:
        geometry = primitives.generate_line(op.p0, op.p1)
        points = geometry.transformed(self.stack.top())
        draw.draw_lines(points, self.target, self.settings.line_color)

    # --- OUTPUT ---

    def _save(self, op: SaveOp) -> None:
        try:
            path = self.io.save_image(self.target, op.filename)
        except ValueError as e:
            raise InvalidOperandError(f"cannot save '{op.filename}': {e}") from e
        self.saved_paths.append(path)

    def _display(self, op: Operation) -> None:
        self.io.display(self.target)


class Engine:
    """
    Drives the three passes over a compiled script.
    """

    def __init__(
        self,
        operations: OperationList,
        symbols: SymbolTable,
        settings: Optional[RenderSettings] = None,
        output_dir: Optional[str] = None,
        io: type[IOManager] = IOManager
    ) -> None:
        """
        Args:
            operations: The compiled operation list.
            symbols: Knob table shared by every frame.
            settings: Screen, tessellation and lighting; defaults apply when omitted.
            output_dir: Where animation frames and the GIF go.
            io: Image output service.
        """
        self.operations = tuple(operations)
        self.symbols = symbols
        self.settings = settings or RenderSettings()
        self.output_dir = output_dir if output_dir is not None else config.DEFAULT_ANIM_DIR
        self.io = io
        self.target = RenderTarget(self.settings.width, self.settings.height, self.settings.background)

    def run(self) -> RenderReport:
        metadata = scan_directives(self.operations)
        keyframes = build_keyframes(self.operations, metadata.frame_count)
        self.symbols.report()

        report = self._render(metadata, keyframes)
        del keyframes

        if metadata.is_animated:
            report.animation_path = self.io.make_animation(
                metadata.basename,
                report.frame_paths,
                self.output_dir,
                duration_ms=self.settings.frame_duration_ms,
            )
        return report

    def _render(self, metadata: AnimationMetadata, keyframes: KeyframeTable) -> RenderReport:
        interpreter = FrameInterpreter(self.operations, self.symbols, self.settings, self.target, self.io)
        report = RenderReport(frame_count=metadata.frame_count, basename=metadata.basename)
        self.target.clear()

        for f in range(metadata.frame_count):
            interpreter.apply_bindings(keyframes.bindings(f))
            interpreter.execute()

            if metadata.is_animated:
                filename = self.io.frame_filename(metadata.basename, f, metadata.frame_count)
                path = self.io.save_image(self.target, os.path.join(self.output_dir, filename))
                report.frame_paths.append(path)
                interpreter.reset()
                logger.info(f"Frame {f + 1}/{metadata.frame_count} done.")

        report.saved_paths = interpreter.saved_paths
        return report
