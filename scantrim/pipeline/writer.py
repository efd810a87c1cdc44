"""Trim a PDF to its retained pages and write it to disk."""

import os
from pathlib import Path
from typing import Sequence, Union

import fitz  # pymupdf

from .errors import WriteError


def write_trimmed_pdf(
    pdf: fitz.Document,
    keep_pages: Sequence[int],
    output_path: Union[str, Path],
) -> Path:
    """Write a copy of ``pdf`` that contains only ``keep_pages``.
    
    The output is saved with unused objects removed, duplicate objects merged
    and streams compressed. It is written to a temporary file first and moved
    into place, so a failed write leaves no file at ``output_path``.
    
    Args:
        pdf: Open pymupdf Document (modified in place by page selection)
        keep_pages: 1-based page numbers to keep, in output order
        output_path: Destination file
        
    Returns:
        Path to the written file
        
    Raises:
        WriteError: If no page is retained or writing fails
    """
    output_path = Path(output_path)
    if not keep_pages:
        raise WriteError(f"No pages retained, refusing to write {output_path.name}")
    
    tmp = output_path.with_suffix(output_path.suffix + ".tmp")
    try:
        if list(keep_pages) != list(range(1, pdf.page_count + 1)):
            pdf.select([n - 1 for n in keep_pages])
        pdf.save(str(tmp), garbage=4, deflate=True)
        os.replace(tmp, output_path)
    except Exception as e:
        if tmp.exists():
            tmp.unlink()
        raise WriteError(f"Failed to write {output_path}: {e}") from e
    
    return output_path
