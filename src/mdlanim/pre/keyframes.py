"""
Keyframe Table
==============
Second pass over the operation list. Every vary command is expanded into
one knob value per frame of its range, and the values are merged into a
per-frame table the frame loop reads from.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from mdlanim.errors import InvalidOperandError
from mdlanim.model.animation import KeyframeTable
from mdlanim.model.operations import OpCode

if TYPE_CHECKING:
    from collections.abc import Iterable

    import numpy.typing as npt

    from mdlanim.model.operations import Operation, VaryOp

logger = logging.getLogger(__name__)


def interpolate(vary: VaryOp) -> npt.NDArray[np.float64]:
    """
    Linearly interpolated knob values for every frame of a vary range.

    Entry ``i`` belongs to frame ``start_frame + i``. The first and last
    entries are exactly ``start_value`` and ``end_value``. A range of a
    single frame yields just ``start_value``.
    """
    n_frames = vary.end_frame - vary.start_frame + 1
    return np.linspace(vary.start_value, vary.end_value, n_frames, dtype=np.float64)


def validate_vary(vary: VaryOp, frame_count: int) -> None:
    if vary.start_frame < 0:
        raise InvalidOperandError(
            f"vary '{vary.knob}': start frame {vary.start_frame} is negative."
        )
    if vary.end_frame < vary.start_frame:
        raise InvalidOperandError(
            f"vary '{vary.knob}': end frame {vary.end_frame} precedes start frame {vary.start_frame}."
        )
    if vary.end_frame >= frame_count:
        raise InvalidOperandError(
            f"vary '{vary.knob}': end frame {vary.end_frame} is beyond the last frame ({frame_count - 1})."
        )


def build_keyframes(operations: Iterable[Operation], frame_count: int) -> KeyframeTable:
    """
    Build the per-frame knob table.

    Args:
        operations: The compiled operation list.
        frame_count: Number of frames from the pre-scan.

    Returns:
        A table with ``frame_count`` slots. When two vary commands set the
        same knob on the same frame, the one later in the script wins.

    Raises:
        InvalidOperandError: A vary range is reversed or outside the animation.
    """
    table = KeyframeTable.empty(frame_count)

    for op in operations:
        if op.opcode != OpCode.VARY:
            continue
        validate_vary(op, frame_count)
        values = interpolate(op)
        for offset, value in enumerate(values):
            table.bind(op.start_frame + offset, op.knob, float(value))
        logger.debug(
            f"vary {op.knob}: frames {op.start_frame}-{op.end_frame}, "
            f"{op.start_value} -> {op.end_value}"
        )

    return table
