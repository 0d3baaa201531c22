"""
Raw RGBA pixel buffer and toroidal coordinate wrapping.

Pixels are addressed by byte offset (``stride*y + 4*x``) instead of going
through a per-pixel image API, which is far too slow for the stages.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from tapeglitch.core.errors import UnsupportedPixelFormat

BYTES_PER_PIXEL = 4

Pixel = Tuple[int, int, int, int]


def wrap(x: int, bound: int) -> int:
    """
    Force ``x`` into [0, bound).

    ``x`` must lie in [-bound, 2*bound); callers keep their composed
    offsets inside that range.
    """
    assert -bound <= x < 2 * bound, f"{x} outside wrap range for bound {bound}"
    if x < 0:
        return x + bound
    if x >= bound:
        return x - bound
    return x


@dataclass
class PixelBuffer:
    """
    Interleaved 8-bit RGBA pixels in one flat byte array.

    Attributes:
        width: Pixels per row.
        height: Number of rows.
        stride: Bytes between the starts of consecutive rows (>= 4*width).
        pix: Flat uint8 array of length ``stride * height``.
    """
    width: int
    height: int
    stride: int
    pix: np.ndarray

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise UnsupportedPixelFormat(
                f"Empty image ({self.width}x{self.height})"
            )
        if self.stride < BYTES_PER_PIXEL * self.width:
            raise UnsupportedPixelFormat(
                f"Stride {self.stride} too small for {self.width} RGBA pixels"
            )
        if self.pix.dtype != np.uint8 or self.pix.ndim != 1:
            raise UnsupportedPixelFormat(
                f"Expected flat uint8 pixel data, got {self.pix.dtype} with shape {self.pix.shape}"
            )
        if not self.pix.flags.c_contiguous:
            raise UnsupportedPixelFormat("Pixel data must be one contiguous block")
        if self.pix.size != self.stride * self.height:
            raise UnsupportedPixelFormat(
                f"Pixel data holds {self.pix.size} bytes, expected {self.stride * self.height}"
            )

    @classmethod
    def new(cls, width: int, height: int) -> "PixelBuffer":
        """Zero-filled buffer with a tight stride."""
        stride = BYTES_PER_PIXEL * width
        return cls(width, height, stride, np.zeros(stride * height, dtype=np.uint8))

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an (H, W, 4) uint8 array.

        The data is copied; the array is left untouched.
        """
        if rgba.ndim != 3 or rgba.shape[2] != BYTES_PER_PIXEL or rgba.dtype != np.uint8:
            raise UnsupportedPixelFormat(
                f"Expected (H, W, 4) uint8 array, got {rgba.dtype} with shape {rgba.shape}"
            )
        h, w = rgba.shape[:2]
        pix = np.ascontiguousarray(rgba).reshape(-1).copy()
        return cls(w, h, BYTES_PER_PIXEL * w, pix)

    def pixel_offset(self, x: int, y: int) -> int:
        return self.stride * y + BYTES_PER_PIXEL * x

    def read_pixel(self, x: int, y: int) -> Pixel:
        i = self.pixel_offset(x, y)
        r, g, b, a = self.pix[i:i + BYTES_PER_PIXEL].tolist()
        return r, g, b, a

    def write_pixel(self, x: int, y: int, rgba: Pixel):
        i = self.pixel_offset(x, y)
        self.pix[i:i + BYTES_PER_PIXEL] = rgba

    def view(self) -> memoryview:
        """Writable byte view of ``pix`` for tight per-pixel loops."""
        return memoryview(self.pix)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.stride, self.pix.copy())

    def as_array(self) -> np.ndarray:
        """(H, W, 4) view of the pixels, skipping any row padding."""
        rows = self.pix.reshape(self.height, self.stride)
        return rows[:, :BYTES_PER_PIXEL * self.width].reshape(
            self.height, self.width, BYTES_PER_PIXEL
        )
