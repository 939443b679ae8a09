"""
Animation metadata produced by the two pre-passes over a script.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from mdlanim import config


@dataclass(frozen=True)
class AnimationMetadata:
    """Frame count and output name, fixed before the first frame is drawn."""
    frame_count: int = 1
    basename: str = config.DEFAULT_BASENAME
    basename_defaulted: bool = False

    @property
    def is_animated(self) -> bool:
        return self.frame_count > 1


@dataclass
class KeyframeTable:
    """
    Knob values for every frame.

    ``frames[j]`` maps knob name to its value at frame ``j``. Frames no
    vary command reaches hold an empty mapping.
    """
    frames: list[dict[str, float]] = field(default_factory=list)

    @classmethod
    def empty(cls, frame_count: int) -> KeyframeTable:
        return cls(frames=[{} for _ in range(frame_count)])

    def bindings(self, frame: int) -> dict[str, float]:
        return self.frames[frame]

    def bind(self, frame: int, knob: str, value: float) -> None:
        self.frames[frame][knob] = value

    def __len__(self) -> int:
        return len(self.frames)
