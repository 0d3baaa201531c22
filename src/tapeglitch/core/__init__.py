"""Core distortion modules."""

from tapeglitch.core.buffer import PixelBuffer, wrap
from tapeglitch.core.errors import GlitchError, InvalidParameter, UnsupportedPixelFormat
from tapeglitch.core.params import DistortionParameters
from tapeglitch.core.rng import GlitchRandom
from tapeglitch.core.stages import (
    aberrate_with_trails,
    brighten,
    dissolve_and_tear,
    scan_lag_and_brighten,
)

__all__ = [
    "PixelBuffer",
    "wrap",
    "GlitchError",
    "InvalidParameter",
    "UnsupportedPixelFormat",
    "DistortionParameters",
    "GlitchRandom",
    "aberrate_with_trails",
    "brighten",
    "dissolve_and_tear",
    "scan_lag_and_brighten",
]
