"""Pipeline stages for blank page trimming."""

from .coverage import estimate_coverage
from .document_pipeline import process_document
from .errors import (
    DecodeError,
    DocumentProcessingError,
    ExtractionError,
    OptimizationError,
    ParseError,
    ValidationError,
    WriteError,
)
from .retention import RetentionPlan, decide_page, should_keep_page

__all__ = [
    "DecodeError",
    "DocumentProcessingError",
    "ExtractionError",
    "OptimizationError",
    "ParseError",
    "RetentionPlan",
    "ValidationError",
    "WriteError",
    "decide_page",
    "estimate_coverage",
    "process_document",
    "should_keep_page",
]
