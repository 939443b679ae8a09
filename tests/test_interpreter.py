import logging
import os

import numpy as np
import pytest
from PIL import Image

from mdlanim.engine.interpreter import Engine
from mdlanim.errors import ConfigurationError, InvalidOperandError, StackUnderflowError, UnresolvedKnobError
from mdlanim.graphics.primitives import generate_box
from mdlanim.model.operations import (
    Axis,
    BasenameOp,
    BoxOp,
    DisplayOp,
    FramesOp,
    LineOp,
    MoveOp,
    PopOp,
    PushOp,
    RotateOp,
    SaveOp,
    VaryOp,
)
from mdlanim.model.symbols import SymbolTable
from mdlanim.pre.parser import parse

UNIT_BOX = BoxOp((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))


def knobs(*names):
    table = SymbolTable()
    for name in names:
        table.declare(name)
    return table


def test_knob_drives_move_across_frames(settings, recording_io, draw_recorder, tmp_path, monkeypatch):
    symbols = knobs("k")
    seen = []

    def record(points, target, lighting):
        seen.append(symbols.lookup("k"))
        return draw_recorder.draw_polygons(points, target, lighting)

    monkeypatch.setattr("mdlanim.graphics.draw.draw_polygons", record)
    ops = [
        FramesOp(10),
        BasenameOp("anim"),
        VaryOp("k", 0, 9, 0, 90),
        MoveOp((1.0, 0.0, 0.0), "k"),
        UNIT_BOX,
    ]
    report = Engine(ops, symbols, settings=settings, output_dir=str(tmp_path), io=recording_io).run()

    assert len(draw_recorder.polygons) == 10
    min_x = [pts[0].min() for pts in draw_recorder.polygons]
    assert min_x[0] == pytest.approx(0.0)
    assert min_x[4] == pytest.approx(40.0)
    assert min_x[5] == pytest.approx(50.0)
    assert min_x[9] == pytest.approx(90.0)
    assert seen[4] == pytest.approx(40.0)
    assert symbols.lookup("k") == 90.0

    assert report.frame_count == 10
    assert [os.path.basename(p) for p in report.frame_paths] == [f"anim{i:03d}.png" for i in range(10)]
    assert recording_io.animations == [("anim", report.frame_paths)]
    assert report.animation_path.endswith("anim.gif")


def test_still_image_saves_once(settings, recording_io, draw_recorder, caplog):
    with caplog.at_level(logging.INFO, logger="mdlanim"):
        report = Engine([UNIT_BOX, SaveOp("out.png")], SymbolTable(), settings=settings, io=recording_io).run()

    assert report.frame_count == 1
    assert [path for path, _ in recording_io.saved] == ["out.png"]
    assert report.saved_paths == ["out.png"]
    assert report.frame_paths == []
    assert recording_io.animations == []
    assert report.animation_path is None
    assert sum("Basename used: basename" in r.getMessage() for r in caplog.records) == 1


def test_vary_without_frames_draws_nothing(settings, recording_io, draw_recorder):
    engine = Engine([VaryOp("k", 0, 9, 0, 1), UNIT_BOX], knobs("k"), settings=settings, io=recording_io)
    with pytest.raises(ConfigurationError):
        engine.run()
    assert draw_recorder.polygons == []
    assert recording_io.saved == []
    assert engine.target.is_blank()


def test_pop_restores_the_outer_coordinate_system(settings, recording_io, draw_recorder):
    ops = [PushOp(), MoveOp((5.0, 0.0, 0.0)), UNIT_BOX, PopOp(), UNIT_BOX]
    Engine(ops, SymbolTable(), settings=settings, io=recording_io).run()

    local = generate_box((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)).points
    moved, restored = draw_recorder.polygons
    assert np.allclose(moved[0], local[0] + 5.0)
    assert np.allclose(restored, local)


def test_transforms_accumulate_until_scope_ends(settings, recording_io, draw_recorder):
    ops = [MoveOp((1.0, 0.0, 0.0)), MoveOp((0.0, 2.0, 0.0)), RotateOp(Axis.Z, 90.0), LineOp((1, 0, 0), (2, 0, 0))]
    Engine(ops, SymbolTable(), settings=settings, io=recording_io).run()
    (line,) = draw_recorder.lines
    assert np.allclose(line[:3, 0], [1.0, 3.0, 0.0])
    assert np.allclose(line[:3, 1], [1.0, 4.0, 0.0])


def test_unmatched_pop_is_fatal(settings, recording_io, draw_recorder):
    with pytest.raises(StackUnderflowError):
        Engine([PushOp(), PopOp(), PopOp(), UNIT_BOX], SymbolTable(), settings=settings, io=recording_io).run()
    assert draw_recorder.polygons == []


def test_undeclared_knob_is_fatal(settings, recording_io, draw_recorder):
    with pytest.raises(UnresolvedKnobError):
        Engine([MoveOp((1.0, 0.0, 0.0), "ghost"), UNIT_BOX], SymbolTable(), settings=settings, io=recording_io).run()


def test_rotate_degrees_scale_with_knob(settings, recording_io, draw_recorder):
    symbols = SymbolTable({"spin": 0.25})
    ops = [RotateOp(Axis.Z, 360.0, "spin"), LineOp((1, 0, 0), (2, 0, 0))]
    Engine(ops, symbols, settings=settings, io=recording_io).run()
    (line,) = draw_recorder.lines
    assert np.allclose(line[:3, 0], [0.0, 1.0, 0.0], atol=1e-12)


def test_each_frame_starts_from_a_fresh_stack(settings, recording_io, draw_recorder):
    ops = [FramesOp(3), MoveOp((10.0, 0.0, 0.0)), PushOp(), UNIT_BOX]
    Engine(ops, SymbolTable(), settings=settings, io=recording_io).run()
    assert len(draw_recorder.polygons) == 3
    for pts in draw_recorder.polygons:
        assert pts[0].min() == pytest.approx(10.0)


def test_frames_are_cleared_between_exports(settings, recording_io):
    script = parse(
        "frames 3\n"
        "basename slide\n"
        "move 0 90 0\n"
        "move 10 0 0 slide\n"
        "box 0 0 0 20 20 20\n"
        "vary slide 0 2 1 3\n"
    )
    Engine(script.operations, script.symbols, settings=settings, io=recording_io).run()
    first, second, third = (color for _, color in recording_io.saved)
    white = (255, 255, 255)
    row = 100 - 1 - 80
    # the box covers x = 10..30, then 20..40, then 30..50
    assert tuple(first[row, 15]) != white
    assert tuple(second[row, 15]) == white
    assert tuple(second[row, 35]) != white
    assert tuple(third[row, 25]) == white
    assert tuple(third[row, 45]) != white


def test_knob_keeps_last_value_outside_its_range(settings, recording_io, draw_recorder):
    symbols = knobs("k")
    ops = [FramesOp(4), VaryOp("k", 0, 1, 5, 7), MoveOp((1.0, 0.0, 0.0), "k"), UNIT_BOX]
    Engine(ops, symbols, settings=settings, io=recording_io).run()
    xs = [pts[0].min() for pts in draw_recorder.polygons]
    assert xs == pytest.approx([5.0, 7.0, 7.0, 7.0])


def test_export_failure_stops_the_run(settings, failing_io, draw_recorder):
    io = failing_io(2)
    with pytest.raises(OSError):
        Engine([FramesOp(5), UNIT_BOX], SymbolTable(), settings=settings, io=io).run()
    assert len(io.saved) == 2
    assert len(draw_recorder.polygons) == 3
    assert io.animations == []


def test_display_and_directives_during_execution(settings, recording_io, draw_recorder):
    ops = [FramesOp(2), BasenameOp("d"), DisplayOp(), VaryOp("k", 0, 1, 0, 1)]
    Engine(ops, knobs("k"), settings=settings, io=recording_io).run()
    assert recording_io.displayed == 2
    assert draw_recorder.polygons == []


def test_end_to_end_files(settings, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    script = parse(
        "frames 4\n"
        "basename spin\n"
        "push\n"
        "move 50 50 0\n"
        "rotate y 90 turn\n"
        "box -20 20 20 40 40 40\n"
        "pop\n"
        "save still.png\n"
        "vary turn 0 3 0 0.5\n"
    )
    anim_dir = tmp_path / "anim"
    report = Engine(script.operations, script.symbols, settings=settings, output_dir=str(anim_dir)).run()

    assert sorted(p.name for p in anim_dir.glob("spin*.png")) == [f"spin{i:03d}.png" for i in range(4)]
    with Image.open(report.animation_path) as gif:
        assert gif.n_frames == 4
        assert gif.size == (100, 100)
    assert (tmp_path / "still.png").exists()
    assert report.saved_paths == ["still.png"] * 4


def test_unwritable_save_format_is_an_operand_error(settings, draw_recorder, tmp_path):
    ops = [UNIT_BOX, SaveOp(str(tmp_path / "picture.xyz"))]
    with pytest.raises(InvalidOperandError, match="picture.xyz"):
        Engine(ops, SymbolTable(), settings=settings).run()


def test_repeated_run_starts_from_a_blank_image(settings, recording_io):
    symbols = SymbolTable({"k": 10})
    ops = [MoveOp((1.0, 0.0, 0.0), "k"), LineOp((0.0, 50.0, 0.0), (5.0, 50.0, 0.0)), SaveOp("out.png")]
    engine = Engine(ops, symbols, settings=settings, io=recording_io)

    engine.run()
    symbols.set("k", 60)
    engine.run()

    first, second = (color for _, color in recording_io.saved)
    row = 100 - 1 - 50
    assert tuple(first[row, 12]) == (0, 0, 0)
    assert tuple(second[row, 12]) == (255, 255, 255)
    assert tuple(second[row, 62]) == (0, 0, 0)
