"""
Directive Pre-Scan
==================
First pass over the operation list. It reads the animation directives
(frames, basename, vary) and fixes the frame count and output name before
anything is drawn.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mdlanim import config
from mdlanim.errors import ConfigurationError, InvalidOperandError
from mdlanim.model.animation import AnimationMetadata
from mdlanim.model.operations import OpCode

if TYPE_CHECKING:
    from mdlanim.model.operations import Operation
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def scan_directives(operations: Iterable[Operation]) -> AnimationMetadata:
    """
    Derive the animation metadata of a script.

    Args:
        operations: The compiled operation list.

    Returns:
        Frame count and basename for the run.

    Raises:
        ConfigurationError: A vary command is present without frames.
        InvalidOperandError: The frame count is not a positive integer.
    """
    frame_count = 1
    basename = None
    frames_found = False
    vary_found = False

    for op in operations:
        if op.opcode == OpCode.FRAMES:
            frame_count = op.count
            frames_found = True
        elif op.opcode == OpCode.BASENAME:
            basename = op.name
        elif op.opcode == OpCode.VARY:
            vary_found = True

    if vary_found and not frames_found:
        raise ConfigurationError("'vary' requires a 'frames' command to know the animation length.")

    if isinstance(frame_count, bool) or not isinstance(frame_count, int) or frame_count < 1:
        raise InvalidOperandError(f"Frame count must be a positive integer, got {frame_count!r}.")

    defaulted = basename is None
    if defaulted:
        basename = config.DEFAULT_BASENAME
        logger.info(f"Basename used: {basename}")

    logger.debug(f"Pre-scan: {frame_count} frame(s), basename '{basename}'.")
    return AnimationMetadata(frame_count=frame_count, basename=basename, basename_defaulted=defaulted)
