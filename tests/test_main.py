"""Tests for the passthrough-config command."""

import yaml

from passthrough.config import CONFIG_FILE_NAME
from passthrough.main import main


def test_check_valid_file(tmp_path, capsys):
    """Test that a valid document is summarized."""
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("overlay: {position: {mode: sticky, distance: 0.5}}\ntoggle_button: b\n")

    assert main(["-c", str(path)]) == 0
    out = capsys.readouterr().out
    assert "sticky" in out
    assert "toggle button: b" in out


def test_check_invalid_file(tmp_path, capsys):
    """Test that schema errors are reported with a non-zero status."""
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("overlay: {position: {mode: orbit}}\n")

    assert main(["-c", str(path)]) == 1
    err = capsys.readouterr().err
    assert "error:" in err
    assert "orbit" in err


def test_check_missing_file(tmp_path, capsys):
    """Test that an unreadable file is reported."""
    assert main(["-c", str(tmp_path / "nope.yaml")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_strict_flag(tmp_path, capsys):
    """Test that --strict rejects unknown keys."""
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text("colour: blue\n")

    assert main(["-c", str(path)]) == 0
    assert main(["--strict", "-c", str(path)]) == 1


def test_print_defaults(capsys):
    """Test that --defaults prints a loadable default document."""
    assert main(["--defaults"]) == 0
    document = yaml.safe_load(capsys.readouterr().out)

    assert document["overlay"] == {"position": {"mode": "hmd", "distance": 1.0}}
    assert document["display"] == {"mode": "direct"}
    assert document["toggle_button"] == "menu"
    assert document["open_delay"] == "0s"
    assert document["z_order"] == 4294967295
    assert document["debug"] is False
