import os

import pytest

from mdlanim import config
from mdlanim.config import RenderSettings
from mdlanim.io import IOManager


class RecordingIO:
    """Stands in for IOManager and remembers every request."""

    frame_filename = staticmethod(IOManager.frame_filename)

    def __init__(self, fail_after=None):
        self.fail_after = fail_after
        self.saved = []
        self.displayed = 0
        self.animations = []

    def save_image(self, target, filepath):
        if self.fail_after is not None and len(self.saved) >= self.fail_after:
            raise OSError(f"cannot write {filepath}")
        self.saved.append((filepath, target.color.copy()))
        return filepath

    def display(self, target):
        self.displayed += 1

    def make_animation(self, basename, frame_paths, output_dir, duration_ms=config.ANIMATION_FRAME_DURATION_MS):
        self.animations.append((basename, list(frame_paths)))
        return os.path.join(output_dir, basename + config.ANIMATION_EXTENSION)


class DrawRecorder:
    def __init__(self):
        self.polygons = []
        self.lines = []

    def draw_polygons(self, points, target, lighting):
        self.polygons.append(points.copy())
        return points.shape[1] // 3

    def draw_lines(self, points, target, color):
        self.lines.append(points.copy())
        return points.shape[1] // 2


@pytest.fixture
def settings():
    return RenderSettings(width=100, height=100, step=6)


@pytest.fixture
def recording_io():
    return RecordingIO()


@pytest.fixture
def failing_io():
    """Factory for an output service whose save fails after ``n`` images."""
    return lambda n: RecordingIO(fail_after=n)


@pytest.fixture
def draw_recorder(monkeypatch):
    recorder = DrawRecorder()
    monkeypatch.setattr("mdlanim.graphics.draw.draw_polygons", recorder.draw_polygons)
    monkeypatch.setattr("mdlanim.graphics.draw.draw_lines", recorder.draw_lines)
    return recorder
