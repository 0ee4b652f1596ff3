"""
Shared fixtures for the file compressor tests.
"""

import io
import random

import pytest
from PIL import Image

from core.config import PluginConfig


@pytest.fixture
def redundant_bytes():
    """100,000 bytes of 0x41, highly compressible."""
    return b"A" * 100_000


@pytest.fixture
def plugin_config(tmp_path):
    """Plugin config with a temporary data directory."""
    config = PluginConfig({})
    config.set_data_dir(tmp_path)
    return config


def _noise_image(mode="RGB", size=(256, 256), seed=0):
    channels = len(mode)
    data = random.Random(seed).randbytes(size[0] * size[1] * channels)
    return Image.frombytes(mode, size, data)


@pytest.fixture
def noise_png():
    """A 256x256 PNG of random pixels (PNG cannot shrink it, JPEG can)."""
    output = io.BytesIO()
    _noise_image().save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def transparent_png():
    """An RGBA PNG with an alpha channel."""
    output = io.BytesIO()
    _noise_image(mode="RGBA", size=(64, 64), seed=1).save(output, format="PNG")
    return output.getvalue()
