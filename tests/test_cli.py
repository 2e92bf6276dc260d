import json
from argparse import ArgumentTypeError

import pytest

from escapeview.cli import build_parser, main, parse_size
from escapeview.geometry import Bounds
from escapeview.location import Location
from escapeview.render_context import RenderContext
from escapeview.snapshot import render_still, screenshot
from escapeview.state import load_context, save_context

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def state_file(tmp_path):
    path = tmp_path / "view.json"
    save_context(RenderContext(loc=Location(re0=-0.5, scalar=0.1, max_iter=50)), path)
    return path


def test_parse_size():
    assert parse_size("80x40") == Bounds(80, 40)
    assert parse_size("80X40") == Bounds(80, 40)


@pytest.mark.parametrize("text", ["80", "axb", "0x10", "10x-1"])
def test_parse_size_rejects_bad_input(text):
    with pytest.raises(ArgumentTypeError):
        parse_size(text)


def test_render_defaults():
    args = build_parser().parse_args(["render", "view.json", "64", "48", "out.png"])
    assert args.command == "render"
    assert (args.width, args.height) == (64, 48)
    assert args.from_size is None
    assert args.scale_method == "min"
    assert args.progress is True
    assert args.blur is False


def test_render_writes_png(state_file, tmp_path):
    dest = tmp_path / "out.png"
    assert main(["render", str(state_file), "32", "24", str(dest), "--no-progress"]) == 0
    assert dest.read_bytes().startswith(PNG_SIGNATURE)


def test_render_with_progress_and_rescale(state_file, tmp_path):
    dest = tmp_path / "big.png"
    argv = ["render", str(state_file), "40", "20", str(dest),
            "--from-size", "20x10", "--scale-method", "avg", "--blur"]
    assert main(argv) == 0
    assert dest.read_bytes().startswith(PNG_SIGNATURE)


def test_render_invalid_state_fails(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"loc": {}}))
    assert main(["render", str(bad), "8", "8", str(tmp_path / "x.png"), "--no-progress"]) == 1


def test_render_undecodable_state_fails(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_bytes(b"\xff\xfe\x00garbage")
    assert main(["render", str(bad), "8", "8", str(tmp_path / "x.png"), "--no-progress"]) == 1


def test_render_missing_state_fails(tmp_path):
    missing = tmp_path / "missing.json"
    assert main(["render", str(missing), "8", "8", str(tmp_path / "x.png"), "--no-progress"]) == 1


def test_render_still_shape():
    rgb = render_still(RenderContext(), Bounds(30, 20))
    assert rgb.shape == (20, 30, 3)


def test_screenshot_saves_state_and_image(tmp_path):
    ctx = RenderContext(loc=Location(scalar=0.1))
    before = ctx.copy()
    json_path, png_path = screenshot(ctx, Bounds(20, 20), tmp_path / "shots", size=Bounds(40, 40))

    assert ctx == before
    with open(png_path, "rb") as f:
        assert f.read(8) == PNG_SIGNATURE

    saved = load_context(json_path)
    assert saved.loc.scalar == pytest.approx(0.05)
    assert saved.loc.origin() == ctx.loc.origin()
    assert saved.function == ctx.function
