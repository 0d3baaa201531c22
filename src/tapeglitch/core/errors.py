"""Exception types raised before or around the distortion core."""


class GlitchError(Exception):
    """Base class for all tapeglitch failures."""
    pass


class UnsupportedPixelFormat(GlitchError):
    """Raised when an input is not an 8-bit RGBA-compatible pixel layout."""
    pass


class InvalidParameter(GlitchError, ValueError):
    """Raised when a distortion parameter is out of its accepted range."""
    pass
