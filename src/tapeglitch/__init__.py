"""Analog-video style glitching for RGBA pixel buffers."""

from tapeglitch.core.buffer import PixelBuffer
from tapeglitch.core.errors import GlitchError, InvalidParameter, UnsupportedPixelFormat
from tapeglitch.core.params import DistortionParameters
from tapeglitch.core.rng import GlitchRandom
from tapeglitch.pipeline import GlitchPipeline

__version__ = "0.1.0"
__all__ = [
    "PixelBuffer",
    "GlitchError",
    "InvalidParameter",
    "UnsupportedPixelFormat",
    "DistortionParameters",
    "GlitchRandom",
    "GlitchPipeline",
]
