"""
PNG decode/encode around the pixel buffer.

Only RGBA-compatible images reach the core. Truecolor RGB is widened to
opaque RGBA; other modes and bit depths other than 8 are rejected unless
conversion is requested.
"""

import io
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from tapeglitch.core.buffer import PixelBuffer
from tapeglitch.core.errors import UnsupportedPixelFormat

Source = Union[str, Path, BinaryIO]

# Modes accepted without an explicit conversion
NATIVE_MODES = ("RGBA", "RGB")

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _ihdr_bit_depth(header: bytes) -> int | None:
    """Bit depth from the IHDR chunk, or None if the bytes are not a PNG."""
    if len(header) < 25 or not header.startswith(PNG_SIGNATURE) or header[12:16] != b"IHDR":
        return None
    return header[24]


def buffer_from_image(image: Image.Image, convert: bool = False) -> PixelBuffer:
    """
    Copy a Pillow image into a pixel buffer.

    Args:
        image: Decoded image.
        convert: Convert any other mode to RGBA instead of failing.

    Raises:
        UnsupportedPixelFormat: If the mode is not RGBA-compatible.
    """
    if image.mode not in NATIVE_MODES and not convert:
        raise UnsupportedPixelFormat(
            f"Unsupported image mode {image.mode!r} (expected one of {', '.join(NATIVE_MODES)}; "
            f"pass convert=True to coerce)"
        )
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return PixelBuffer.from_array(np.asarray(image, dtype=np.uint8))


def image_from_buffer(buf: PixelBuffer) -> Image.Image:
    """Non-premultiplied RGBA Pillow image with the buffer's pixels."""
    return Image.fromarray(np.ascontiguousarray(buf.as_array()))


def load_buffer(source: Source, convert: bool = False) -> PixelBuffer:
    """
    Decode a PNG from a path or binary stream.

    Pillow maps 16-bit PNGs onto 8-bit modes, so the bit depth is read
    from the IHDR chunk before decoding.

    Raises:
        UnsupportedPixelFormat: If the data is not a PNG, the bit depth is
            not 8, or the image mode is not RGBA-compatible.
    """
    if isinstance(source, (str, Path)):
        with open(source, "rb") as f:
            data = f.read()
    else:
        data = source.read()

    depth = _ihdr_bit_depth(data[:25])
    if depth is not None and depth != 8 and not convert:
        raise UnsupportedPixelFormat(
            f"Unsupported PNG bit depth {depth} (expected 8; pass convert=True to coerce)"
        )

    try:
        img = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as e:
        raise UnsupportedPixelFormat(f"Cannot decode image: {e}") from e

    with img:
        if img.format != "PNG":
            raise UnsupportedPixelFormat(f"Expected PNG input, got {img.format}")
        img.load()
        return buffer_from_image(img, convert=convert)


def save_buffer(buf: PixelBuffer, target: Source, compress_level: int = 0):
    """
    Encode the buffer as an RGBA PNG.

    Args:
        buf: Pixels to write.
        target: Output path or binary stream.
        compress_level: zlib level 0-9 (0 = stored, fastest).
    """
    if isinstance(target, (str, Path)):
        Path(target).parent.mkdir(parents=True, exist_ok=True)
    image_from_buffer(buf).save(target, format="PNG", compress_level=compress_level)
