"""Document data model representing a parsed scanned PDF."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .page import Page


@dataclass
class Document:
    """Represents a PDF document owned by the pipeline for one job.
    
    Attributes:
        filename: PDF filename
        filepath: Full path to PDF file
        page_count: Number of pages in document
        size: File size in bytes
        pages: List of Page objects (filled by the optimize step)
        retention: Page number -> keep (True) / discard (False); pages without
            images have no entry and are kept
    """
    
    filename: str
    filepath: str
    page_count: int
    size: int = 0
    pages: List[Page] = field(default_factory=list)
    retention: Dict[int, bool] = field(default_factory=dict)
    
    def __post_init__(self):
        """Validate that page_count matches actual pages once pages are indexed."""
        if self.pages and len(self.pages) != self.page_count:
            raise ValueError(
                f"Page count mismatch: expected {self.page_count}, "
                f"got {len(self.pages)} pages"
            )
    
    def kept_pages(self) -> List[int]:
        """Page numbers that survive trimming, in document order."""
        return [
            n for n in range(1, self.page_count + 1)
            if self.retention.get(n, True)
        ]
