"""
Application Entry
=================
Reads an MDL script, renders it and reports what was written.

Why is this file needed?
------------------------
It is the composition root. It:
1. Sets up logging.
2. Parses the script into operations and knobs.
3. Hands both to the Engine together with the output settings.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from mdlanim import config
from mdlanim.config import RenderSettings
from mdlanim.engine.interpreter import Engine, RenderReport
from mdlanim.errors import MDLError
from mdlanim.logging_config import setup_logging
from mdlanim.pre.parser import parse_file

logger = logging.getLogger(__name__)


def resolve_script_path(path: str) -> str:
    """
    The given path, or the bundled sample of that name when no such file exists.
    """
    if os.path.exists(path):
        return path
    bundled = os.path.join(config.ASSETS_PATH, path)
    if os.path.exists(bundled):
        logger.debug(f"Using bundled script: {bundled}")
        return bundled
    return path


def run_script(
    path: str,
    output_dir: str = config.DEFAULT_ANIM_DIR,
    settings: Optional[RenderSettings] = None
) -> RenderReport:
    """
    Parse and render one script file.

    Args:
        path: MDL script to run, or the name of a bundled sample.
        output_dir: Directory for animation frames and the GIF.
        settings: Render settings; package defaults when omitted.
    """
    script = parse_file(resolve_script_path(path))
    engine = Engine(script.operations, script.symbols, settings=settings, output_dir=output_dir)
    return engine.run()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdlanim",
        description="Render (and animate) an MDL scene-description script."
    )
    parser.add_argument("script", help="path to the .mdl script")
    parser.add_argument(
        "-o", "--output-dir",
        default=config.DEFAULT_ANIM_DIR,
        help=f"directory for animation frames (default: {config.DEFAULT_ANIM_DIR})"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log every operation")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    # 2. Render
    try:
        report = run_script(args.script, output_dir=args.output_dir)
    except (MDLError, OSError) as e:
        logger.error(f"Rendering failed: {e}")
        return 1

    # 3. Summary
    if report.animation_path:
        logger.info(f"{report.frame_count} frames rendered, animation: {report.animation_path}")
    else:
        logger.info(f"Rendered {len(report.saved_paths)} saved image(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
