import errno
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from imgico import cli
from imgico.ico import read_ico
from imgico.sizes import DEFAULT_SIZES


@pytest.fixture
def input_file(tmp_path, red_png):
    path = tmp_path / "logo.png"
    path.write_bytes(red_png)
    return path


def output_dirs(root):
    return sorted(p for p in root.iterdir() if p.name.startswith("imgico-"))


def test_timestamp_format():
    now = datetime(2024, 3, 5, 7, 8, 9, 123456, tzinfo=timezone.utc)
    assert cli.timestamp(now) == "2024-03-05T07-08-09-123Z"


def test_ico_outputs(tmp_path, input_file, capsys):
    out_root = tmp_path / "out"
    assert cli.main([str(input_file), "-o", str(out_root)]) == 0

    (out_dir,) = output_dirs(out_root)
    assert sorted(p.name for p in out_dir.iterdir()) == sorted(
        f"{s}.ico" for s in DEFAULT_SIZES
    )
    for size in DEFAULT_SIZES:
        (entry,) = read_ico((out_dir / f"{size}.ico").read_bytes())
        assert entry.size == size

    assert capsys.readouterr().out.strip() == f"Extracted ICO images to {out_dir}"


def test_svg_outputs_format_is_case_insensitive(tmp_path, input_file, capsys):
    out_root = tmp_path / "out"
    assert cli.main([str(input_file), "--format", "SVG", "-o", str(out_root)]) == 0

    (out_dir,) = output_dirs(out_root)
    svg = (out_dir / "16.svg").read_text(encoding="utf-8")
    assert svg.startswith('<svg width="16" height="16"')
    assert "Extracted SVG images" in capsys.readouterr().out


def test_missing_input(tmp_path, capsys):
    out_root = tmp_path / "out"
    assert cli.main([str(tmp_path / "nope.png"), "-o", str(out_root)]) == 1
    err = capsys.readouterr().err
    assert "Failed to read input file" in err
    assert "nope.png" in err
    assert not out_root.exists()


def test_undecodable_input_writes_nothing(tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"definitely not an image")
    out_root = tmp_path / "out"
    assert cli.main([str(bad), "-o", str(out_root)]) == 1
    assert "Failed to load image" in capsys.readouterr().err
    assert not out_root.exists()


def test_invalid_size_in_config(tmp_path, input_file, capsys):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"sizes": [16, 300]}))
    out_root = tmp_path / "out"
    code = cli.main([str(input_file), "--config", str(config_path), "-o", str(out_root)])
    assert code == 1
    assert "Invalid icon size: 300" in capsys.readouterr().err
    assert not out_root.exists()


def test_config_sizes_and_prefix(tmp_path, input_file):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "sizes": [20, 40],
        "output": {"root": str(tmp_path / "icons"), "prefix": "imgico"},
    }))
    assert cli.main([str(input_file), "--config", str(config_path)]) == 0
    (out_dir,) = output_dirs(tmp_path / "icons")
    assert sorted(p.name for p in out_dir.iterdir()) == ["20.ico", "40.ico"]


def test_bad_format_is_usage_error(input_file):
    with pytest.raises(SystemExit) as info:
        cli.main([str(input_file), "--format", "png"])
    assert info.value.code == 2


def test_log_file_written(tmp_path, input_file, isolated_data_dir):
    assert cli.main([str(input_file), "-o", str(tmp_path / "out")]) == 0
    log = (isolated_data_dir / "imgico_log.txt").read_text(encoding="utf-8")
    assert "Wrote" in log


def test_failed_write_leaves_nothing_behind(tmp_path, input_file, monkeypatch, capsys):
    real_write_bytes = Path.write_bytes
    calls = []

    def flaky_write_bytes(self, data):
        calls.append(self.name)
        if len(calls) == 3:
            real_write_bytes(self, data[:10])
            raise OSError(errno.ENOSPC, "No space left on device")
        return real_write_bytes(self, data)

    monkeypatch.setattr(Path, "write_bytes", flaky_write_bytes)
    out_root = tmp_path / "out"
    assert cli.main([str(input_file), "-o", str(out_root)]) == 1

    assert "Failed to write output file" in capsys.readouterr().err
    assert "48.ico" in calls
    assert list(out_root.iterdir()) == []


def test_existing_output_root_is_left_untouched(tmp_path, input_file, monkeypatch):
    out_root = tmp_path / "out"
    out_root.mkdir()
    (out_root / "keep.txt").write_text("mine")

    def failing_write_bytes(self, data):
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(Path, "write_bytes", failing_write_bytes)
    assert cli.main([str(input_file), "-o", str(out_root)]) == 1
    assert [p.name for p in out_root.iterdir()] == ["keep.txt"]


@pytest.mark.parametrize("settings, message", [
    ({"workers": "4"}, "workers"),
    ({"workers": 0}, "workers"),
    ({"sizes": 16}, "Invalid icon size: 16"),
    ({"sizes": "16"}, "Invalid icon size: 16"),
    ({"resample": 3}, "resample"),
    ({"output": {"prefix": 7}}, "output.prefix"),
    ({"format": "png"}, "unsupported format"),
])
def test_bad_config_values_are_reported(tmp_path, input_file, capsys, settings, message):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(settings))
    out_root = tmp_path / "out"
    code = cli.main([str(input_file), "--config", str(config_path), "-o", str(out_root)])
    assert code == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert message in err
    assert not out_root.exists()


def test_directory_dump_only_when_debugging(tmp_path, input_file, monkeypatch):
    def unexpected_read(data):
        raise AssertionError("directory parsed with DEBUG logging disabled")

    monkeypatch.setattr(cli, "read_ico", unexpected_read)
    assert cli.main([str(input_file), "-o", str(tmp_path / "out")]) == 0
