"""CoverageResult data model for a single evaluated page image."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CoverageResult:
    """Ink coverage of one decoded image.
    
    Attributes:
        coverage: Percentage of ink pixels (0-100)
        width: Image width in pixels
        height: Image height in pixels
        ink_pixels: Number of pixels with at least one channel below the near-white level
        blank_pixels: Number of remaining (near-white) pixels
    """
    
    coverage: float
    width: int
    height: int
    ink_pixels: int
    blank_pixels: int
    
    def __post_init__(self):
        """Validate coverage range and pixel counts."""
        if not 0.0 <= self.coverage <= 100.0:
            raise ValueError(f"coverage must be within 0-100, got {self.coverage}")
        if self.ink_pixels + self.blank_pixels != self.width * self.height:
            raise ValueError(
                f"Pixel count mismatch: {self.ink_pixels} ink + {self.blank_pixels} blank "
                f"!= {self.width}x{self.height}"
            )
    
    @property
    def max_x(self) -> int:
        """Largest valid x index (max-inclusive bound)."""
        return self.width - 1
    
    @property
    def max_y(self) -> int:
        """Largest valid y index (max-inclusive bound)."""
        return self.height - 1
    
    @property
    def bounds(self) -> str:
        return f"(0,0)-({self.width},{self.height})"
