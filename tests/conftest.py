import numpy as np
import pytest

from poorlaroid.engine import PixelBuffer


@pytest.fixture
def noisy_frame():
    """A 40x30 frame where neighbouring pixels differ, so sampling mistakes show up."""
    rng = np.random.default_rng(42)
    return PixelBuffer(rng.integers(0, 256, size=(30, 40, 3), dtype=np.uint8))


@pytest.fixture
def cli_config(tmp_path, monkeypatch):
    """Point the per-user directories at tmp_path and write a quiet config file."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_PICTURES_DIR", str(tmp_path / "Pictures"))
    path = tmp_path / "config.json"
    path.write_text('{"logging": {"console": false}}', encoding="utf-8")
    return path
