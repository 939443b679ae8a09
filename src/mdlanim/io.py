"""
Image Output Manager
Saves render targets to image files, shows them on screen and assembles
animation frames into a GIF.
"""
from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
from PIL import Image

from mdlanim import config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mdlanim.graphics.draw import RenderTarget

# Get module logger
logger = logging.getLogger(__name__)


class IOManager:

    @staticmethod
    def frame_filename(basename: str, index: int, frame_count: int) -> str:
        """
        File name of one animation frame.

        The index is zero padded to at least three digits and to as many
        digits as the last index has, so names sort in frame order.
        """
        digits = max(config.FRAME_INDEX_MIN_DIGITS, len(str(max(frame_count - 1, 0))))
        return f"{basename}{index:0{digits}d}{config.FRAME_EXTENSION}"

    @staticmethod
    def save_image(target: RenderTarget, filepath: str) -> str:
        """
        Writes the colour buffer; the format follows the file extension.

        Raises:
            OSError: The file could not be written.
            ValueError: The extension is not a format Pillow can write.
        """
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        Image.fromarray(target.color).save(filepath)
        logger.info(f"Image saved to: {filepath}")
        return filepath

    @staticmethod
    def display(target: RenderTarget) -> None:
        """
        Shows the colour buffer in a window and blocks until it is closed.
        """
        fig = plt.figure(figsize=(target.width / 100, target.height / 100))
        plt.imshow(target.color)
        plt.axis("off")
        plt.title("mdlanim")
        plt.show()
        plt.close(fig)

    @staticmethod
    def make_animation(
        basename: str,
        frame_paths: Sequence[str],
        output_dir: str,
        duration_ms: int = config.ANIMATION_FRAME_DURATION_MS
    ) -> str:
        """
        Assembles saved frames, in the given order, into a looping GIF.

        Returns:
            Path of the written animation.
        """
        if not frame_paths:
            raise ValueError("No frames to assemble into an animation.")

        os.makedirs(output_dir, exist_ok=True)
        anim_path = os.path.join(output_dir, f"{basename}{config.ANIMATION_EXTENSION}")

        frames = []
        for path in frame_paths:
            with Image.open(path) as im:
                frames.append(im.convert("RGB"))

        first, *rest = frames
        first.save(
            anim_path,
            save_all=True,
            append_images=rest,
            duration=duration_ms,
            loop=0,
        )
        logger.info(f"Animation of {len(frames)} frames saved to: {anim_path}")
        return anim_path
