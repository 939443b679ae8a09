"""
MDL Script Parser
=================
Turns the text of an MDL script into an operation list and the knob
symbol table.

The language is line oriented: one command per line, ``//`` starts a
comment. Keywords are case-insensitive; knob and file names are not.

Supported commands::

    push | pop | display
    move x y z [knob]          scale x y z [knob]
    rotate x|y|z degrees [knob]
    box [constants] x y z width height depth [coord_system]
    sphere [constants] x y z radius [coord_system]
    torus [constants] x y z r0 r1 [coord_system]
    line [constants] x0 y0 z0 [cs0] x1 y1 z1 [cs1]
    save filename              basename name          frames n
    vary knob start_frame end_frame start_value end_value
    set knob value             setknobs value

``set`` and ``setknobs`` assign initial knob values at compile time and
do not appear in the operation list. Constants and coordinate-system
names are accepted for compatibility but carry no meaning here.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from mdlanim.errors import MDLSyntaxError
from mdlanim.model.operations import (
    Axis,
    BasenameOp,
    BoxOp,
    DisplayOp,
    FramesOp,
    LineOp,
    MoveOp,
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

logger = logging.getLogger(__name__)

COMMENT = "//"


@dataclass(frozen=True)
class ParsedScript:
    operations: OperationList
    symbols: SymbolTable


def _is_number(token: str) -> bool:
    """Finite numeric literal; ``nan``, ``inf`` and overflowing literals are not numbers."""
    try:
        value = float(token)
    except ValueError:
        return False
    return math.isfinite(value)


def _numbers(tokens: list[str], count: int, command: str) -> tuple[float, ...]:
    if len(tokens) != count or not all(_is_number(t) for t in tokens):
        raise MDLSyntaxError(f"'{command}' expects {count} numbers, got {' '.join(tokens) or 'nothing'}")
    return tuple(float(t) for t in tokens)


def _integer(token: str, command: str) -> int:
    try:
        value = float(token)
    except ValueError:
        raise MDLSyntaxError(f"'{command}' expects an integer, got '{token}'") from None
    if not value.is_integer():
        raise MDLSyntaxError(f"'{command}' expects an integer, got '{token}'")
    return int(value)


def _split_optional_name(tokens: list[str], numeric_count: int, command: str) -> tuple[tuple[float, ...], str | None]:
    """Numbers followed by at most one trailing name (a knob)."""
    if len(tokens) == numeric_count + 1 and not _is_number(tokens[-1]):
        return _numbers(tokens[:-1], numeric_count, command), tokens[-1]
    return _numbers(tokens, numeric_count, command), None


def _strip_shape_names(tokens: list[str], numeric_count: int, command: str) -> tuple[float, ...]:
    """Drop a leading constants name and a trailing coordinate-system name."""
    if tokens and not _is_number(tokens[0]):
        tokens = tokens[1:]
    if len(tokens) == numeric_count + 1 and not _is_number(tokens[-1]):
        tokens = tokens[:-1]
    return _numbers(tokens, numeric_count, command)


class Parser:
    """
    Single-use parser; ``parse`` may be called once per instance.
    """

    def __init__(self) -> None:
        self.operations: list[Operation] = []
        self.symbols = SymbolTable()
        self._handlers: dict[str, Callable[[list[str]], None]] = {
            "push": self._push,
            "pop": self._pop,
            "move": self._move,
            "scale": self._scale,
            "rotate": self._rotate,
            "box": self._box,
            "sphere": self._sphere,
            "torus": self._torus,
            "line": self._line,
            "save": self._save,
            "display": self._display,
            "frames": self._frames,
            "basename": self._basename,
            "vary": self._vary,
            "set": self._set,
            "setknobs": self._setknobs,
        }

    def parse(self, source: str) -> ParsedScript:
        for line_number, raw in enumerate(source.splitlines(), start=1):
            line = raw.split(COMMENT, 1)[0].strip()
            if not line:
                continue
            keyword, *args = line.split()
            handler = self._handlers.get(keyword.lower())
            if handler is None:
                raise MDLSyntaxError(f"unknown command '{keyword}'", line_number)
            try:
                handler(args)
            except MDLSyntaxError as e:
                if e.line_number is not None:
                    raise
                raise MDLSyntaxError(str(e), line_number) from None

        logger.debug(f"Parsed {len(self.operations)} operations, {len(self.symbols)} knobs.")
        return ParsedScript(operations=tuple(self.operations), symbols=self.symbols)

    # --- STACK ---

    def _push(self, args: list[str]) -> None:
        self._no_arguments(args, "push")
        self.operations.append(PushOp())

    def _pop(self, args: list[str]) -> None:
        self._no_arguments(args, "pop")
        self.operations.append(PopOp())

    # --- TRANSFORMS ---

    def _move(self, args: list[str]) -> None:
        values, knob = _split_optional_name(args, 3, "move")
        self.operations.append(MoveOp(offset=values, knob=knob))

    def _scale(self, args: list[str]) -> None:
        values, knob = _split_optional_name(args, 3, "scale")
        self.operations.append(ScaleOp(factors=values, knob=knob))

    def _rotate(self, args: list[str]) -> None:
        if len(args) not in (2, 3):
            raise MDLSyntaxError("'rotate' expects an axis, degrees and an optional knob")
        axis_name = args[0].upper()
        if axis_name not in Axis.__members__:
            raise MDLSyntaxError(f"'rotate' axis must be x, y or z, got '{args[0]}'")
        (degrees,), knob = _split_optional_name(args[1:], 1, "rotate")
        self.operations.append(RotateOp(axis=Axis[axis_name], degrees=degrees, knob=knob))

    # --- SHAPES ---

    def _box(self, args: list[str]) -> None:
        values = _strip_shape_names(args, 6, "box")
        self.operations.append(BoxOp(corner=values[:3], size=values[3:]))

    def _sphere(self, args: list[str]) -> None:
        x, y, z, r = _strip_shape_names(args, 4, "sphere")
        self.operations.append(SphereOp(center=(x, y, z), radius=r))

    def _torus(self, args: list[str]) -> None:
        x, y, z, r0, r1 = _strip_shape_names(args, 5, "torus")
        self.operations.append(TorusOp(center=(x, y, z), r0=r0, r1=r1))

    def _line(self, args: list[str]) -> None:
        if args and not _is_number(args[0]):
            args = args[1:]
        # Coordinate systems may follow either endpoint
        numbers = [t for i, t in enumerate(args) if _is_number(t) or i not in (3, len(args) - 1)]
        values = _numbers(numbers, 6, "line")
        self.operations.append(LineOp(p0=values[:3], p1=values[3:]))

    # --- OUTPUT ---

    def _save(self, args: list[str]) -> None:
        if len(args) != 1:
            raise MDLSyntaxError("'save' expects exactly one file name")
        self.operations.append(SaveOp(filename=args[0]))

    def _display(self, args: list[str]) -> None:
        self._no_arguments(args, "display")
        self.operations.append(DisplayOp())

    # --- ANIMATION ---

    def _frames(self, args: list[str]) -> None:
        if len(args) != 1:
            raise MDLSyntaxError("'frames' expects exactly one integer")
        self.operations.append(FramesOp(count=_integer(args[0], "frames")))

    def _basename(self, args: list[str]) -> None:
        if len(args) != 1:
            raise MDLSyntaxError("'basename' expects exactly one name")
        self.operations.append(BasenameOp(name=args[0]))

    def _vary(self, args: list[str]) -> None:
        if len(args) != 5 or _is_number(args[0]):
            raise MDLSyntaxError("'vary' expects a knob, start frame, end frame, start value and end value")
        knob = args[0]
        start_frame = _integer(args[1], "vary")
        end_frame = _integer(args[2], "vary")
        start_value, end_value = _numbers(args[3:], 2, "vary")
        self.symbols.declare(knob)
        self.operations.append(VaryOp(
            knob=knob,
            start_frame=start_frame,
            end_frame=end_frame,
            start_value=start_value,
            end_value=end_value,
        ))

    # --- KNOB INITIALISERS ---

    def _set(self, args: list[str]) -> None:
        if len(args) != 2 or _is_number(args[0]):
            raise MDLSyntaxError("'set' expects a knob name and a value")
        (value,) = _numbers(args[1:], 1, "set")
        self.symbols.set(args[0], value)

    def _setknobs(self, args: list[str]) -> None:
        (value,) = _numbers(args, 1, "setknobs")
        for name in self.symbols.names():
            self.symbols.set(name, value)

    @staticmethod
    def _no_arguments(args: list[str], command: str) -> None:
        if args:
            raise MDLSyntaxError(f"'{command}' takes no arguments")


def parse(source: str) -> ParsedScript:
    """Parse MDL source text."""
    return Parser().parse(source)


def parse_file(path: str | Path) -> ParsedScript:
    """Parse the MDL script stored at ``path``."""
    path = Path(path)
    logger.info(f"Reading script: {path}")
    return parse(path.read_text(encoding="utf-8"))
