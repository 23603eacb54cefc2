"""Shared test fixtures."""

import os
import shutil
import tempfile

import numpy as np
import pytest
from PIL import Image

from ModBrew.config import BuildConfig


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config(tmp_dir):
    return make_config(tmp_dir)


def save_test_png(path, width=64, height=64, alpha=True):
    """Create a random test PNG image and return its RGBA array."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    arr = np.random.randint(0, 256, (height, width, 4), dtype=np.uint8)
    if not alpha:
        arr[:, :, 3] = 255
    Image.fromarray(arr if alpha else arr[:, :, :3]).save(path)
    return arr


def write_text(path, text):
    """Write ``text`` to ``path``, creating parent folders."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def make_config(tmp_dir, **overrides):
    """Return a BuildConfig rooted inside ``tmp_dir``."""
    config = BuildConfig()
    config.mod_path = os.path.join(tmp_dir, "MyMod")
    config.output_dir = os.path.join(tmp_dir, "out")
    config.show_progress = False
    for key, value in overrides.items():
        setattr(config, key, value)
    return config
