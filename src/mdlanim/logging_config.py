"""
Logging Configuration
=====================
Sets up the 'mdlanim' logger for a command-line render.

What ends up where?
-------------------
- INFO: the basename notice, the knob table, one line per finished frame
  and every written image.
- DEBUG: one line per transform (with the knob that scaled it) and the
  parser summary.

The console shows the requested level. A log file, when given, always
receives the DEBUG trace so a failed animation can be replayed step by
step without rerunning it verbosely.
"""
import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger for the 'mdlanim' namespace.

    Args:
        level: Console logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path of a file that receives the full DEBUG trace.
    """
    logger = logging.getLogger("mdlanim")
    logger.setLevel(logging.DEBUG if log_file else level)

    # Running several scripts in one process must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # 1. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File Handler (Optional, always DEBUG)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized (console: {logging.getLevelName(level)}).")
