"""
Main glitch pipeline.

Orchestrates the three distortion passes over a decoded pixel buffer and
offers file/image conveniences around them.
"""

from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from PIL import Image

from tapeglitch.core.buffer import PixelBuffer
from tapeglitch.core.params import DistortionParameters
from tapeglitch.core.rng import GlitchRandom
from tapeglitch.core.stages import (
    aberrate_with_trails,
    dissolve_and_tear,
    scan_lag_and_brighten,
)
from tapeglitch.io.png import buffer_from_image, image_from_buffer, load_buffer, save_buffer

ProgressCallback = Optional[Callable[[int, int], None]]

N_STAGES = 3


class GlitchPipeline:
    """
    Complete buffer-to-buffer glitch pipeline.

    Owns the single random stream shared by all stages, so two pipelines
    built with the same seed and parameters produce identical output.
    """

    def __init__(
        self,
        params: DistortionParameters | None = None,
        seed: int | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            params: Distortion knobs (validated here).
            seed: Random seed; ``None`` or -1 seeds from the current time.

        Raises:
            InvalidParameter: If ``params`` fails validation.
        """
        self.params = (params or DistortionParameters()).validate()
        self.rng = GlitchRandom(seed)

    @property
    def seed(self) -> int:
        """Effective seed, including one derived from the clock."""
        return self.rng.seed

    def dissolve(self, buf: PixelBuffer, progress_callback: ProgressCallback = None) -> PixelBuffer:
        """Stage 1: dissolve blur + block tearing into a new buffer."""
        return dissolve_and_tear(buf, self.params, self.rng, progress_callback)

    def scan_lag(self, buf: PixelBuffer, progress_callback: ProgressCallback = None) -> PixelBuffer:
        """Stage 2: per-channel scan lag + brighten into a new buffer."""
        return scan_lag_and_brighten(buf, self.params, self.rng, progress_callback)

    def aberrate(self, buf: PixelBuffer, progress_callback: ProgressCallback = None) -> PixelBuffer:
        """Stage 3: chromatic aberration + trails, mutating ``buf``."""
        return aberrate_with_trails(buf, self.params, self.rng, progress_callback)

    def process(self, buf: PixelBuffer, progress_callback: ProgressCallback = None) -> PixelBuffer:
        """
        Run all three stages in order.

        Args:
            buf: Decoded RGBA input. Left unmodified.
            progress_callback: Optional callback(rows_done, total_rows),
                counting rows across all stages.

        Returns:
            New buffer with the same width and height.
        """
        total = N_STAGES * buf.height

        def _stage_progress(stage: int):
            if progress_callback is None:
                return None
            done = stage * buf.height
            return lambda current, _: progress_callback(done + current, total)

        dissolved = self.dissolve(buf, _stage_progress(0))
        lagged = self.scan_lag(dissolved, _stage_progress(1))
        return self.aberrate(lagged, _stage_progress(2))

    def process_image(
        self,
        image: Image.Image,
        convert: bool = False,
        progress_callback: ProgressCallback = None,
    ) -> Image.Image:
        """Glitch a Pillow image and return a new RGBA image."""
        buf = buffer_from_image(image, convert=convert)
        return image_from_buffer(self.process(buf, progress_callback))

    def process_file(
        self,
        input_path: Union[str, Path, BinaryIO],
        output_path: Union[str, Path, BinaryIO],
        convert: bool = False,
        compress_level: int = 0,
        progress_callback: ProgressCallback = None,
    ) -> PixelBuffer:
        """
        Decode a PNG, glitch it, and encode the result.

        Args:
            input_path: PNG path or binary stream.
            output_path: Output path or binary stream.
            convert: Coerce non-RGBA inputs to RGBA.
            compress_level: PNG zlib level (0 = uncompressed).
            progress_callback: Optional callback(rows_done, total_rows).

        Returns:
            The glitched buffer that was written.
        """
        buf = load_buffer(input_path, convert=convert)
        result = self.process(buf, progress_callback)
        save_buffer(result, output_path, compress_level=compress_level)
        return result
