"""Per-document pipeline: parse, validate, index, scan page images, trim and write."""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import fitz  # pymupdf
from PIL import Image

from ..config import ProfileConfig, get_profile
from ..log_fields import FieldsAdapter, get_logger
from ..models.coverage_result import CoverageResult
from ..models.document import Document
from ..models.page import Page
from .coverage import estimate_coverage
from .images import decode_jpeg, extract_page_image
from .reader import create_document, optimize_structure, parse_pdf, validate_structure
from .retention import RetentionPlan
from .writer import write_trimmed_pdf


def scan_image(
    pdf: fitz.Document,
    page: Page,
    xref: int,
    profile: ProfileConfig,
    log: FieldsAdapter,
) -> Tuple[CoverageResult, Image.Image]:
    """Extract, decode and measure one image of a page.

    The result is appended to ``page.coverages``.

    Returns:
        Tuple of (coverage result, coverage mask)
    """
    log.info("processing image", fields={"page": page.page_number, "image": xref})
    data = extract_page_image(pdf, xref)
    
    with decode_jpeg(data) as image:
        log.debug(
            "decoded jpeg",
            fields={"page": page.page_number, "image": xref, "size": f"{image.width}x{image.height}"},
        )
        result, mask = estimate_coverage(image, profile.near_white_level)

    page.coverages.append(result)
    log.info(
        "calculated coverage",
        fields={
            "page": page.page_number,
            "image": xref,
            "bounds": result.bounds,
            "coverage": f"{result.coverage:.4f}",
        },
    )
    return result, mask


def save_masks(masks: Dict[str, Image.Image], mask_dir: Path) -> None:
    """Write collected coverage masks as PNG files into ``mask_dir``."""
    for name, mask in masks.items():
        mask.save(mask_dir / name)


def process_document(
    source_path: Union[str, Path],
    dest_path: Union[str, Path],
    profile: Optional[ProfileConfig] = None,
    log: Optional[FieldsAdapter] = None,
) -> Document:
    """Strip blank-image pages from a PDF and write the trimmed copy.
    
    Steps run strictly in order and the first failure aborts the document
    without writing ``dest_path``. With ``write_masks`` the coverage masks
    are saved next to ``dest_path`` as ``mask-p<page>-x<xref>.png``, only
    once the trimmed PDF has been written.
    
    Args:
        source_path: PDF to read
        dest_path: Where the trimmed PDF is written
        profile: Configuration (active profile if None)
        log: Logger carrying the job's context fields
        
    Returns:
        The processed Document, with ``retention`` filled in
        
    Raises:
        ParseError, ValidationError, OptimizationError, ExtractionError,
        DecodeError, WriteError: from the failing step
    """
    profile = profile or get_profile()
    log = log or get_logger(__name__)
    source_path = Path(source_path)
    dest_path = Path(dest_path)
    masks: Dict[str, Image.Image] = {}

    pdf = parse_pdf(source_path)
    try:
        validate_structure(pdf, strict=profile.strict_validation)
        document = create_document(pdf, source_path)
        optimize_structure(pdf, document)
        log.info("validated pdf", fields={"pages": document.page_count, "size": document.size})
        
        plan = RetentionPlan(rule=profile.retention_rule, threshold=profile.blank_coverage_threshold)
        for page in document.pages:
            log.info(
                "processing page",
                fields={"page": page.page_number, "images": ",".join(map(str, page.image_xrefs))},
            )
            if not page.has_images:
                log.debug("page has no images, keeping it", fields={"page": page.page_number})
                continue
            for xref in page.image_xrefs:
                result, mask = scan_image(pdf, page, xref, profile, log)
                plan.record(page.page_number, result.coverage)
                if profile.write_masks:
                    masks[f"mask-p{page.page_number}-x{xref}.png"] = mask
        
        document.retention = plan.as_map()
        log.info(
            "final retention map",
            fields={"retention": ",".join(f"{n}:{keep}" for n, keep in document.retention.items())},
        )
        
        kept = document.kept_pages()
        write_trimmed_pdf(pdf, kept, dest_path)
        log.info(
            "wrote trimmed pdf",
            fields={
                "output": str(dest_path),
                "kept": len(kept),
                "dropped": document.page_count - len(kept),
            },
        )
        if masks:
            save_masks(masks, dest_path.parent)
            log.info("saved coverage masks", fields={"count": len(masks)})
        return document
    finally:
        pdf.close()
