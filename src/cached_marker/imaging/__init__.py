"""Image processing: resize and re-encode fetched images."""

from cached_marker.imaging.processor import ImageProcessor, PillowImageProcessor

__all__ = ["ImageProcessor", "PillowImageProcessor"]
