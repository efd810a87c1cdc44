"""Ink coverage estimation for decoded page images.

A pixel counts as ink when any of its red, green or blue channels is below
the near-white level. Levels are expressed in the 16-bit range (0-65535);
8-bit samples are widened by ``v * 257`` before comparison, so the default
level of 60000 (~91.6% brightness) makes 8-bit values <= 233 ink.

Pixel bounds are exclusive: an image of ``width x height`` pixels has
``width * height`` samples, and coverage is
``100 * ink_pixels / (width * height)``.
"""

from typing import List, Tuple

from PIL import Image, ImageChops

from ..models.coverage_result import CoverageResult

NEAR_WHITE_LEVEL = 60000
SAMPLE_WIDEN = 257  # 0xFF -> 0xFFFF

INK = 0
BLANK = 255


def widen_sample(value: int) -> int:
    """Widen an 8-bit channel sample to the 16-bit range."""
    return value * SAMPLE_WIDEN


def _ink_lut(near_white_level: int) -> List[int]:
    return [255 if widen_sample(v) < near_white_level else 0 for v in range(256)]


def estimate_coverage(
    image: Image.Image,
    near_white_level: int = NEAR_WHITE_LEVEL,
) -> Tuple[CoverageResult, Image.Image]:
    """Compute the ink coverage of an image and its two-color mask.
    
    Args:
        image: Decoded image (any Pillow mode; converted to RGB for comparison)
        near_white_level: 16-bit channel value at or above which a channel is near-white
        
    Returns:
        (CoverageResult, mask) where mask is an "L" image of the same size with
        ink pixels black (0) and blank pixels white (255)
    """
    rgb = image if image.mode == "RGB" else image.convert("RGB")
    width, height = rgb.size
    
    lut = _ink_lut(near_white_level)
    red, green, blue = (band.point(lut) for band in rgb.split())
    # 255 where any channel is ink
    ink = ImageChops.lighter(ImageChops.lighter(red, green), blue)
    
    total = width * height
    ink_pixels = ink.histogram()[255] if total else 0
    coverage = 100.0 * ink_pixels / total if total else 0.0
    
    result = CoverageResult(
        coverage=coverage,
        width=width,
        height=height,
        ink_pixels=ink_pixels,
        blank_pixels=total - ink_pixels,
    )
    return result, ImageChops.invert(ink)
