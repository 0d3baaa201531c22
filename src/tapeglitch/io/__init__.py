"""PNG decode/encode."""

from tapeglitch.io.png import buffer_from_image, image_from_buffer, load_buffer, save_buffer

__all__ = ["buffer_from_image", "image_from_buffer", "load_buffer", "save_buffer"]
