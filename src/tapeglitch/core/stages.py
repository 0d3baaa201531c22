"""
The three pixel passes of the glitch pipeline.

1. Dissolve + block tearing: every pixel is resampled from a jittered
   source position; rows inside a "tear block" share a horizontal shift
   and a linear skew.
2. Per-channel scan lag + brighten: R, G and B drift horizontally on
   independent random walks, then get a contrast-reducing brighten.
3. Chromatic aberration + trails: R and B are pulled from offset columns
   of the buffer being written, so colors smear along each row.

Every pass walks rows top to bottom and columns left to right. The RNG
draw order inside the loops is fixed; changing it changes the output
for a given seed.

Composed offsets are reduced modulo the axis length before wrapping, so
arbitrarily large parameter values tile around the image instead of
indexing out of range.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from tapeglitch.core.buffer import BYTES_PER_PIXEL, PixelBuffer, wrap
from tapeglitch.core.params import DistortionParameters
from tapeglitch.core.rng import GlitchRandom

RowCallback = Optional[Callable[[int, int], None]]


def brighten(c: int, add: int) -> int:
    """
    Brighten a channel value while reducing contrast.

    ``add=0`` is the identity and ``add=255`` maps everything to 255.
    """
    return (c - c * add // 255 + add) & 0xFF


@dataclass
class BlockState:
    """Current tear block: shared shift, skew rate and first row."""
    line_offset: int = 0
    stride_rate: float = 0.0
    block_start_y: int = 0


@dataclass
class ScanLagState:
    """Running horizontal lag of each color channel."""
    lag_r: float = 0.0
    lag_g: float = 0.0
    lag_b: float = 0.0


def dissolve_and_tear(
    src: PixelBuffer,
    params: DistortionParameters,
    rng: GlitchRandom,
    progress_callback: RowCallback = None,
) -> PixelBuffer:
    """
    Stage 1: dissolve blur and block tearing.

    Args:
        src: Decoded input. Never modified.
        params: Distortion knobs.
        rng: Shared random stream.
        progress_callback: Optional callback(rows_done, total_rows).

    Returns:
        New tightly packed buffer of the same size.
    """
    width, height = src.width, src.height
    dst = PixelBuffer.new(width, height)
    spix, dpix = src.view(), dst.view()

    block = BlockState()
    # On average one new block every block_height rows
    block_chance = params.block_height * width
    blur = params.blur_magnitude

    for y in range(height):
        for x in range(width):
            if rng.uniform_int(block_chance) == 0:
                block.line_offset = rng.offset(params.block_offset_strength)
                block.stride_rate = rng.normal_float() * params.stride_magnitude
                block.block_start_y = y

            # zero on the block's first row
            stride_offset = int(block.stride_rate * (y - block.block_start_y))

            offset_x = rng.offset(blur) + block.line_offset + stride_offset
            offset_y = rng.offset(blur)

            sx = wrap(x + offset_x % width, width)
            sy = wrap(y + offset_y % height, height)

            s = src.stride * sy + BYTES_PER_PIXEL * sx
            d = dst.stride * y + BYTES_PER_PIXEL * x
            dpix[d:d + BYTES_PER_PIXEL] = spix[s:s + BYTES_PER_PIXEL]

        if progress_callback:
            progress_callback(y + 1, height)

    return dst


def scan_lag_and_brighten(
    src: PixelBuffer,
    params: DistortionParameters,
    rng: GlitchRandom,
    progress_callback: RowCallback = None,
) -> PixelBuffer:
    """
    Stage 2: per-channel scanline lag followed by brightening.

    Red and alpha come from the same source pixel. The red/blue border
    is additionally jittered by a shared per-pixel offset.

    Returns:
        New tightly packed buffer of the same size.
    """
    width, height = src.width, src.height
    dst = PixelBuffer.new(width, height)
    spix, dpix = src.view(), dst.view()

    lags = ScanLagState(params.initial_lag_r, params.initial_lag_g, params.initial_lag_b)
    lag = params.scan_lag_strength
    add = params.brighten_amount
    edge_stddev = params.nondestructive_offset_stddev

    for y in range(height):
        row = src.stride * y
        for x in range(width):
            lags.lag_r += rng.normal_float() * lag
            lags.lag_g += rng.normal_float() * lag
            lags.lag_b += rng.normal_float() * lag
            edge = rng.offset(edge_stddev)

            ra = row + BYTES_PER_PIXEL * wrap(x + (int(lags.lag_r) - edge) % width, width)
            gi = row + BYTES_PER_PIXEL * wrap(x + int(lags.lag_g) % width, width)
            bi = row + BYTES_PER_PIXEL * wrap(x + (int(lags.lag_b) + edge) % width, width)

            r = spix[ra]
            a = spix[ra + 3]
            g = spix[gi + 1]
            b = spix[bi + 2]

            d = dst.stride * y + BYTES_PER_PIXEL * x
            dpix[d:d + BYTES_PER_PIXEL] = bytes((brighten(r, add), brighten(g, add), brighten(b, add), a))

        if progress_callback:
            progress_callback(y + 1, height)

    return dst


def aberrate_with_trails(
    buf: PixelBuffer,
    params: DistortionParameters,
    rng: GlitchRandom,
    progress_callback: RowCallback = None,
) -> PixelBuffer:
    """
    Stage 3: chromatic aberration with color trails, in place.

    Reads and writes the same buffer, so pixels later in a row see the
    already rewritten pixels before them. That feedback is what draws
    the trails; a lower ``aberration_stddev`` makes them longer.

    Returns:
        ``buf`` itself.
    """
    width, height = buf.width, buf.height
    pix = buf.view()
    mean = params.aberration_mean
    stddev = params.aberration_stddev

    for y in range(height):
        row = buf.stride * y
        for x in range(width):
            offset_x = mean + rng.offset(stddev)

            ra = row + BYTES_PER_PIXEL * wrap(x + offset_x % width, width)
            gi = row + BYTES_PER_PIXEL * x
            bi = row + BYTES_PER_PIXEL * wrap(x + (-offset_x) % width, width)

            pix[gi:gi + BYTES_PER_PIXEL] = bytes((pix[ra], pix[gi + 1], pix[bi + 2], pix[ra + 3]))

        if progress_callback:
            progress_callback(y + 1, height)

    return buf
