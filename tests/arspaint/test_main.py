import json
import logging

import pytest
from PIL import Image

from arspaint.__main__ import main
from arspaint.version import __version__

logger = logging.getLogger(__name__)


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_no_command():
    with pytest.raises(SystemExit):
        main([])


def test_new(tmp_path):
    output = tmp_path / "blank.png"
    assert main(["new", "20", "10", str(output), "--color", "1,2,3,255"]) is None
    with Image.open(output) as image:
        assert image.size == (20, 10)
        assert image.getpixel((0, 0)) == (1, 2, 3, 255)


def test_new_invalid_color(tmp_path):
    with pytest.raises(SystemExit):
        main(["new", "20", "10", str(tmp_path / "x.png"), "--color", "red"])


def test_new_invalid_size(tmp_path):
    assert main(["new", "0", "10", str(tmp_path / "x.png")]) == 1


def test_show(tmp_path, capsys):
    path = tmp_path / "in.png"
    Image.new("RGB", (8, 6)).save(path)
    assert main(["show", str(path)]) is None
    out = capsys.readouterr().out
    assert "Document" in out
    assert "Background" in out


def test_export(tmp_path):
    source = tmp_path / "in.png"
    Image.new("RGBA", (8, 6), (5, 6, 7, 255)).save(source)
    output = tmp_path / "out.bmp"
    assert main(["-v", "export", str(source), str(output)]) is None
    with Image.open(output) as image:
        assert image.getpixel((1, 1)) == (5, 6, 7)


def test_export_missing_input(tmp_path):
    assert main(["export", str(tmp_path / "none.png"), str(tmp_path / "out.png")]) == 1


def test_replay(tmp_path):
    source = tmp_path / "in.png"
    Image.new("RGB", (40, 40), (255, 255, 255)).save(source)
    script = tmp_path / "script.json"
    script.write_text(json.dumps([{"tool": "rectangle"}, {"stroke": [[5, 5], [30, 30]]}]))
    output = tmp_path / "out.png"
    assert main(["replay", str(source), str(script), str(output)]) is None
    with Image.open(output) as image:
        assert image.getpixel((5, 15)) == (0, 0, 0, 255)
        assert image.getpixel((15, 15)) == (255, 255, 255, 255)


@pytest.mark.parametrize(
    "actions",
    [
        [{"spray": 1}],
        [{"stroke": {"secondary": True}}],
        [{"color": 5}],
        [{"active_layer": None}],
        {"undo": 1},
    ],
)
def test_replay_bad_script(tmp_path, actions):
    source = tmp_path / "in.png"
    Image.new("RGB", (4, 4)).save(source)
    script = tmp_path / "script.json"
    script.write_text(json.dumps(actions))
    output = tmp_path / "o.png"
    assert main(["replay", str(source), str(script), str(output)]) == 1
    assert not output.exists()
