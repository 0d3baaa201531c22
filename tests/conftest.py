"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest
from PIL import Image

from tapeglitch.core.buffer import PixelBuffer
from tapeglitch.core.rng import GlitchRandom


class FixedRandom(GlitchRandom):
    """Random stream that always returns the same draws."""

    def __init__(self, uniform: int = 1, normal: float = 0.0):
        super().__init__(seed=0)
        self.uniform = uniform
        self.normal = normal
        self.calls = []

    def uniform_int(self, n: int) -> int:
        self.calls.append("int")
        return min(self.uniform, n - 1)

    def normal_float(self) -> float:
        self.calls.append("norm")
        return self.normal


@pytest.fixture
def fixed_rng():
    """Factory for random streams with constant draws."""
    return FixedRandom


@pytest.fixture
def solid_buffer() -> PixelBuffer:
    """4x4 buffer filled with (10, 20, 30, 255)."""
    rgba = np.empty((4, 4, 4), dtype=np.uint8)
    rgba[:] = (10, 20, 30, 255)
    return PixelBuffer.from_array(rgba)


@pytest.fixture
def gradient_array() -> np.ndarray:
    """
    (12, 16, 4) image where every pixel is distinct.

    R encodes x, G encodes y, B mixes both, A varies per row.
    """
    h, w = 12, 16
    y, x = np.mgrid[0:h, 0:w]
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[..., 0] = x * 15
    rgba[..., 1] = y * 20
    rgba[..., 2] = (x * 7 + y * 11) % 256
    rgba[..., 3] = 255 - y
    return rgba


@pytest.fixture
def gradient_buffer(gradient_array) -> PixelBuffer:
    return PixelBuffer.from_array(gradient_array)


@pytest.fixture
def padded_buffer(gradient_array) -> PixelBuffer:
    """Gradient buffer whose rows carry 8 bytes of padding."""
    h, w = gradient_array.shape[:2]
    stride = 4 * w + 8
    rows = np.full((h, stride), 0xAB, dtype=np.uint8)
    rows[:, :4 * w] = gradient_array.reshape(h, 4 * w)
    return PixelBuffer(w, h, stride, rows.reshape(-1))


@pytest.fixture
def solid_png(tmp_path):
    """4x4 RGBA PNG filled with (10, 20, 30, 255)."""
    path = tmp_path / "solid.png"
    Image.new("RGBA", (4, 4), (10, 20, 30, 255)).save(path)
    return path


@pytest.fixture
def gradient_png(tmp_path, gradient_array):
    path = tmp_path / "gradient.png"
    Image.fromarray(gradient_array).save(path)
    return path
