"""Page data model representing a single page from a scanned PDF."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .coverage_result import CoverageResult


@dataclass
class Page:
    """Represents a single page from a PDF document.
    
    Attributes:
        page_number: Page number (starts at 1)
        image_xrefs: Cross-reference numbers of the images drawn on this page
        coverages: Coverage results of the images evaluated so far, in xref order
    """
    
    page_number: int
    image_xrefs: List[int] = field(default_factory=list)
    coverages: List[CoverageResult] = field(default_factory=list)
    
    def __post_init__(self):
        """Validate page number is positive."""
        if self.page_number < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page_number}")
    
    @property
    def has_images(self) -> bool:
        return bool(self.image_xrefs)
