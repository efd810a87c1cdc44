"""Data models for documents, pages, coverage results and processing jobs."""

from .coverage_result import CoverageResult
from .document import Document
from .job import IncomingFile, ProcessingJob
from .page import Page

__all__ = ["CoverageResult", "Document", "IncomingFile", "Page", "ProcessingJob"]
