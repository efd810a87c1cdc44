"""PDF reading, structural validation and per-page image indexing using pymupdf."""

import logging
from pathlib import Path
from typing import Union

import fitz  # pymupdf

from ..models.document import Document
from ..models.page import Page
from .errors import OptimizationError, ParseError, ValidationError

logger = logging.getLogger(__name__)


def parse_pdf(filepath: Union[str, Path]) -> fitz.Document:
    """Open and parse a PDF file.
    
    Args:
        filepath: Path to PDF file
        
    Returns:
        Open pymupdf Document; the caller is responsible for closing it
        
    Raises:
        ParseError: If the file is missing, unreadable or not a parseable PDF
    """
    try:
        return fitz.open(str(filepath), filetype="pdf")
    except Exception as e:
        raise ParseError(f"Failed to read PDF {filepath}: {e}") from e


def validate_structure(pdf: fitz.Document, strict: bool = False) -> None:
    """Check that a parsed document is a usable, unencrypted PDF with pages.
    
    Args:
        pdf: Open pymupdf Document
        strict: Also reject documents whose cross-reference table was broken
            and had to be rebuilt when opening
            
    Raises:
        ValidationError: If any structural check fails
    """
    if not pdf.is_pdf:
        raise ValidationError(f"Not a PDF document: {pdf.name}")
    if pdf.needs_pass:
        raise ValidationError(f"PDF is encrypted: {pdf.name}")
    if pdf.page_count < 1:
        raise ValidationError(f"PDF has no pages: {pdf.name}")
    if pdf.is_repaired:
        if strict:
            raise ValidationError(f"PDF cross-reference table is damaged: {pdf.name}")
        logger.warning("Cross-reference table of %s was repaired on load", pdf.name)


def create_document(pdf: fitz.Document, filepath: Union[str, Path]) -> Document:
    """Create the Document model for a validated PDF (pages not yet indexed)."""
    path = Path(filepath)
    try:
        size = path.stat().st_size
    except OSError:
        size = 0
    return Document(
        filename=path.name,
        filepath=str(path),
        page_count=pdf.page_count,
        size=size,
    )


def optimize_structure(pdf: fitz.Document, document: Document) -> Document:
    """Build the per-page image index of a document.
    
    Each page lists the cross-reference numbers of the images it draws, in
    first-seen order and without duplicates.
    
    Args:
        pdf: Open pymupdf Document
        document: Document model to fill
        
    Returns:
        The same Document with ``pages`` populated
        
    Raises:
        OptimizationError: If the page tree or image resources cannot be read
    """
    pages = []
    try:
        for fitz_page in pdf:
            xrefs = []
            for image_info in fitz_page.get_images(full=True):
                xref = image_info[0]
                if xref > 0 and xref not in xrefs:
                    xrefs.append(xref)
            pages.append(Page(page_number=fitz_page.number + 1, image_xrefs=xrefs))
    except Exception as e:
        raise OptimizationError(
            f"Failed to index page images of {document.filename}: {e}"
        ) from e
    
    if len(pages) != document.page_count:
        raise OptimizationError(
            f"Page count mismatch in {document.filename}: "
            f"expected {document.page_count}, indexed {len(pages)}"
        )
    document.pages = pages
    return document
