import io

import pytest
from PIL import Image


def make_png(size=(512, 512), color=(255, 0, 0), mode="RGB") -> bytes:
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def red_png():
    """A 512x512 opaque red PNG."""
    return make_png()


@pytest.fixture
def wide_png():
    return make_png(size=(40, 20), color=(0, 128, 255, 200), mode="RGBA")


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Keep config and log files out of the real home directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr("imgico.config.CONFIG_FILE", data_dir / "config.json")
    monkeypatch.setattr("imgico.cli.LOG_FILE", data_dir / "imgico_log.txt")
    return data_dir
