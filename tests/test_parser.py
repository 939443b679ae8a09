import pytest

from mdlanim.errors import MDLSyntaxError
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
    ScaleOp,
    SphereOp,
    TorusOp,
    VaryOp,
)
from mdlanim.pre.parser import parse, parse_file

SCRIPT = """\
// animated scene
frames 10
basename anim

push
move 1 0 0 k
scale 2 2 2
rotate Y 90 spin
box 0 0 0 10 20 30
sphere 1 2 3 4
torus 0 0 0 1 5
line 0 0 0 5 5 5
pop
save out.png
display
vary k 0 9 0 90
vary spin 0 9 0 1
"""


def test_parses_every_command():
    script = parse(SCRIPT)
    assert script.operations == (
        FramesOp(10),
        BasenameOp("anim"),
        PushOp(),
        MoveOp((1.0, 0.0, 0.0), "k"),
        ScaleOp((2.0, 2.0, 2.0)),
        RotateOp(Axis.Y, 90.0, "spin"),
        BoxOp((0.0, 0.0, 0.0), (10.0, 20.0, 30.0)),
        SphereOp((1.0, 2.0, 3.0), 4.0),
        TorusOp((0.0, 0.0, 0.0), 1.0, 5.0),
        LineOp((0.0, 0.0, 0.0), (5.0, 5.0, 5.0)),
        PopOp(),
        SaveOp("out.png"),
        DisplayOp(),
        VaryOp("k", 0, 9, 0.0, 90.0),
        VaryOp("spin", 0, 9, 0.0, 1.0),
    )
    assert script.operations[6].opposite_corner == (10.0, -20.0, -30.0)


def test_vary_declares_knobs_at_zero():
    script = parse(SCRIPT)
    assert script.symbols.names() == ["k", "spin"]
    assert script.symbols.lookup("k") == 0.0


def test_knob_references_do_not_declare_symbols():
    script = parse("move 1 2 3 ghost\n")
    assert "ghost" not in script.symbols


def test_shape_constants_and_coordinate_systems_are_ignored():
    script = parse(
        "box shiny 0 0 0 1 1 1 world\n"
        "sphere shiny 0 0 0 2\n"
        "torus 0 0 0 1 3 world\n"
        "line shiny 0 0 0 cs0 1 1 1 cs1\n"
        "line 0 0 0 1 1 1 cs1\n"
    )
    assert script.operations == (
        BoxOp((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)),
        SphereOp((0.0, 0.0, 0.0), 2.0),
        TorusOp((0.0, 0.0, 0.0), 1.0, 3.0),
        LineOp((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)),
        LineOp((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)),
    )


def test_set_and_setknobs_initialise_symbols():
    script = parse(
        "vary a 0 1 0 1\n"
        "vary b 0 1 0 1\n"
        "setknobs 0.5\n"
        "set c 3\n"
        "frames 2\n"
    )
    assert dict(script.symbols.items()) == {"a": 0.5, "b": 0.5, "c": 3.0}
    assert all(op.opcode.value != "set" for op in script.operations)


def test_comments_and_case():
    script = parse("PUSH // keep\n   \nMove 1 2 3 // trailing\n// all comment\n")
    assert script.operations == (PushOp(), MoveOp((1.0, 2.0, 3.0)))


def test_operations_are_immutable():
    script = parse("push\n")
    assert isinstance(script.operations, tuple)
    with pytest.raises(AttributeError):
        script.operations[0].knob = "x"


@pytest.mark.parametrize("source, line", [
    ("push\nfly 1 2 3\n", 2),
    ("move 1 2\n", 1),
    ("push\n\nrotate w 90\n", 3),
    ("frames 2.5\n", 1),
    ("vary k 0 9 0\n", 1),
    ("pop 3\n", 1),
    ("box 0 0 0 1 1\n", 1),
    ("move nan 0 0\n", 1),
    ("push\nscale 1 inf 1\n", 2),
    ("sphere 0 0 0 1e999\n", 1),
    ("set k nan\n", 1),
    ("frames inf\n", 1),
])
def test_syntax_errors_carry_line_numbers(source, line):
    with pytest.raises(MDLSyntaxError) as excinfo:
        parse(source)
    assert excinfo.value.line_number == line
    assert f"line {line}" in str(excinfo.value)


def test_parse_file(tmp_path):
    path = tmp_path / "scene.mdl"
    path.write_text("push\npop\n", encoding="utf-8")
    assert parse_file(path).operations == (PushOp(), PopOp())
