"""End-to-end runs of the command-line front-end against files on disk."""

import io

import pytest

from svg_inspector.cli import EXIT_ERROR, EXIT_NOOP, EXIT_OK, main


@pytest.fixture
def svg_file(tmp_path, nested_svg):
    path = tmp_path / "drawing.svg"
    path.write_text(nested_svg, encoding="utf-8")
    return path


def run(*argv):
    out = io.StringIO()
    code = main(["--no-logging-setup", *[str(a) for a in argv]], out=out)
    return code, out.getvalue()


def test_tree_lists_layers_with_paths(svg_file):
    code, output = run("tree", svg_file)
    assert code == EXIT_OK
    assert output.splitlines() == [
        "svg  [/]",
        "  g#layer1  [0]",
        "    rect#r1  [0/0]",
        "    rect#r2  [0/1]",
        "  g#layer2  [1]",
        "    circle#c1  [1/0]",
        "  text#t  [2]",
    ]


def test_attrs_expands_style(tmp_path):
    path = tmp_path / "styled.svg"
    path.write_text('<svg><rect id="a" style="fill:red;stroke:blue"/></svg>', encoding="utf-8")
    code, output = run("attrs", path, "0")
    assert code == EXIT_OK
    assert output.splitlines() == ["id=a", "style:", "  fill: red", "  stroke: blue"]


def test_set_attr_writes_file(svg_file):
    code, output = run("set-attr", svg_file, "0/1", "fill", "red")
    assert code == EXIT_OK
    assert '<rect id="r2" fill="red"/>' in svg_file.read_text(encoding="utf-8")


def test_noop_edit_leaves_file_untouched(svg_file, nested_svg):
    code, output = run("del-attr", svg_file, "0/1", "fill")
    assert code == EXIT_NOOP
    assert svg_file.read_text(encoding="utf-8") == nested_svg


def test_style_commands(svg_file):
    assert run("set-style", svg_file, "2", "fill", "red")[0] == EXIT_OK
    assert run("set-style", svg_file, "2", "opacity", "0.5")[0] == EXIT_OK
    assert run("del-style", svg_file, "2", "fill")[0] == EXIT_OK
    assert 'style="opacity: 0.5"' in svg_file.read_text(encoding="utf-8")


def test_reorder_attr_command(tmp_path):
    path = tmp_path / "ordered.svg"
    path.write_text('<svg><rect id="a" x="1" fill="red"/></svg>', encoding="utf-8")
    code, _ = run("reorder-attr", path, "0", "fill", "id", "--position", "before")
    assert code == EXIT_OK
    assert path.read_text(encoding="utf-8") == '<svg><rect fill="red" id="a" x="1"/></svg>'
    code, _ = run("reorder-attr", path, "0", "fill", "fill", "--position", "after")
    assert code == EXIT_NOOP


def test_reorder_style_command(tmp_path):
    path = tmp_path / "styled.svg"
    path.write_text('<svg><rect style="fill: red; stroke: blue"/></svg>', encoding="utf-8")
    code, _ = run("reorder-style", path, "0", "stroke", "fill", "--position", "before")
    assert code == EXIT_OK
    assert 'style="stroke: blue; fill: red"' in path.read_text(encoding="utf-8")


def test_reorder_requires_position(svg_file):
    with pytest.raises(SystemExit):
        run("reorder-attr", svg_file, "0", "id", "id")


def test_prefixed_attribute_commands(tmp_path, xlink_svg):
    path = tmp_path / "linked.svg"
    path.write_text(xlink_svg, encoding="utf-8")
    code, output = run("attrs", path, "1")
    assert code == EXIT_OK
    assert output.splitlines() == ["id=u", "xlink:href=#a"]

    assert run("set-attr", path, "1", "xlink:href", "#b")[0] == EXIT_OK
    text = path.read_text(encoding="utf-8")
    assert '<use id="u" xlink:href="#b"/>' in text
    assert "<!-- logo -->" in text

    assert run("del-attr", path, "1", "xlink:href")[0] == EXIT_OK
    assert '<use id="u"/>' in path.read_text(encoding="utf-8")
    assert run("set-attr", path, "1", "nope:href", "#b")[0] == EXIT_NOOP


def test_toggle_then_tree_marks_hidden(svg_file):
    assert run("toggle", svg_file, "1")[0] == EXIT_OK
    code, output = run("tree", svg_file)
    assert "  g#layer2  [1]  (hidden)" in output.splitlines()


def test_move_and_group(svg_file):
    code, _ = run("move", svg_file, "--source", "2", "--target", "0", "--position", "before")
    assert code == EXIT_OK
    code, _ = run("group", svg_file, "0", "1")
    assert code == EXIT_OK
    code, output = run("tree", svg_file)
    assert output.splitlines()[:4] == [
        "svg  [/]",
        "  g  [0]",
        "    text#t  [0/0]",
        "    g#layer1  [0/1]",
    ]


def test_group_rejects_non_siblings(svg_file):
    code, _ = run("group", svg_file, "0/0", "1/0")
    assert code == EXIT_NOOP


def test_unknown_path_is_an_error(svg_file):
    assert run("attrs", svg_file, "9")[0] == EXIT_ERROR


def test_unparseable_file_is_an_error(tmp_path):
    path = tmp_path / "broken.svg"
    path.write_text("<svg><rect></svg>", encoding="utf-8")
    assert run("tree", path)[0] == EXIT_ERROR


def test_missing_file_is_an_error(tmp_path):
    assert run("tree", tmp_path / "nope.svg")[0] == EXIT_ERROR


def test_bad_path_argument_exits(svg_file):
    with pytest.raises(SystemExit):
        run("attrs", svg_file, "x/y")
