"""Exceptions raised by the document pipeline, one per processing step."""


class DocumentProcessingError(Exception):
    """Base class for failures that abort processing of one document."""
    pass


class ParseError(DocumentProcessingError):
    """Raised when a PDF cannot be opened or parsed."""
    pass


class ValidationError(DocumentProcessingError):
    """Raised when a parsed PDF fails structural validation."""
    pass


class OptimizationError(DocumentProcessingError):
    """Raised when the per-page image index cannot be built."""
    pass


class ExtractionError(DocumentProcessingError):
    """Raised when an embedded image stream cannot be extracted."""
    pass


class DecodeError(DocumentProcessingError):
    """Raised when extracted image bytes are not a decodable JPEG."""
    pass


class WriteError(DocumentProcessingError):
    """Raised when the trimmed PDF cannot be written."""
    pass
