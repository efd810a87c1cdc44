"""Tests for the per-document trimming pipeline using real PDFs built with pymupdf."""

from pathlib import Path
from unittest.mock import patch

import fitz
import pytest

from scan_builders import BLACK, GREY, WHITE, jpeg_bytes, make_scan_pdf, page_count, page_image_colors, png_bytes
from scantrim.config import ProfileConfig
from scantrim.pipeline.document_pipeline import process_document
from scantrim.pipeline.errors import (
    DecodeError,
    DocumentProcessingError,
    ExtractionError,
    OptimizationError,
    ParseError,
    ValidationError,
    WriteError,
)


@pytest.fixture
def out_path(tmp_path):
    d = tmp_path / "out"
    d.mkdir()
    return d / "processed.pdf"


class TestProcessDocument:
    """End-to-end trimming of scanned PDFs."""
    
    def test_blank_page_removed(self, two_page_scan, out_path):
        """Page 1 (ink) is kept, page 2 (blank) is dropped."""
        document = process_document(two_page_scan, out_path, profile=ProfileConfig())
        
        assert out_path.exists()
        assert page_count(out_path) == 1
        assert document.retention == {1: True, 2: False}
        assert document.kept_pages() == [1]
        # The surviving page is the dark one
        assert page_image_colors(out_path)[0][0] < 50
    
    def test_document_metadata(self, two_page_scan, out_path):
        document = process_document(two_page_scan, out_path, profile=ProfileConfig())
        
        assert document.filename == "scan.pdf"
        assert document.page_count == 2
        assert document.size == two_page_scan.stat().st_size
        assert len(document.pages) == 2
        assert document.pages[0].coverages[0].coverage > 50.0
        assert document.pages[1].coverages[0].coverage == 0.0
    
    def test_page_without_images_is_kept(self, tmp_path, out_path):
        src = make_scan_pdf(
            tmp_path / "mixed.pdf",
            [[jpeg_bytes(BLACK)], [], [jpeg_bytes(WHITE)]],
        )
        document = process_document(src, out_path, profile=ProfileConfig())
        
        assert document.retention == {1: True, 3: False}
        assert 2 not in document.retention
        assert page_count(out_path) == 2
    
    def test_all_pages_kept(self, tmp_path, out_path):
        src = make_scan_pdf(
            tmp_path / "full.pdf",
            [[jpeg_bytes(BLACK)], [jpeg_bytes(GREY)]],
        )
        process_document(src, out_path, profile=ProfileConfig())
        assert page_count(out_path) == 2
    
    def test_retention_rule_any_vs_all(self, tmp_path):
        """Page 2 has one ink and one blank image."""
        src = make_scan_pdf(
            tmp_path / "two-images.pdf",
            [[jpeg_bytes(BLACK)], [jpeg_bytes(GREY), jpeg_bytes(WHITE)]],
        )
        out_all = tmp_path / "all.pdf"
        out_any = tmp_path / "any.pdf"
        
        doc_all = process_document(src, out_all, profile=ProfileConfig(retention_rule="all"))
        doc_any = process_document(src, out_any, profile=ProfileConfig(retention_rule="any"))
        
        assert doc_all.retention[2] is False
        assert doc_any.retention[2] is True
        assert page_count(out_all) == 1
        assert page_count(out_any) == 2
    
    def test_threshold_from_profile(self, two_page_scan, out_path):
        """With a 0% threshold nothing is blank."""
        document = process_document(
            two_page_scan, out_path, profile=ProfileConfig(blank_coverage_threshold=0.0)
        )
        assert document.retention == {1: True, 2: True}
        assert page_count(out_path) == 2
    
    def test_write_masks(self, two_page_scan, out_path):
        process_document(two_page_scan, out_path, profile=ProfileConfig(write_masks=True))
        masks = sorted(p.name for p in out_path.parent.glob("mask-*.png"))
        assert len(masks) == 2
        assert masks[0].startswith("mask-p1-x")
        assert masks[1].startswith("mask-p2-x")
    
    def test_uses_active_profile_when_none_given(self, two_page_scan, out_path):
        document = process_document(two_page_scan, out_path)
        assert document.kept_pages() == [1]


class TestProcessDocumentErrors:
    """Each step fails with its own error and no output is written."""
    
    def test_parse_error_on_garbage(self, tmp_path, out_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"this is not a pdf at all")
        with pytest.raises(ParseError):
            process_document(bad, out_path, profile=ProfileConfig())
        assert not out_path.exists()
    
    def test_parse_error_on_missing_file(self, tmp_path, out_path):
        with pytest.raises(ParseError):
            process_document(tmp_path / "missing.pdf", out_path, profile=ProfileConfig())
    
    def test_validation_error_on_encrypted(self, tmp_path, out_path):
        doc = fitz.open()
        doc.new_page()
        locked = tmp_path / "locked.pdf"
        doc.save(
            str(locked),
            encryption=fitz.PDF_ENCRYPT_AES_256,
            owner_pw="owner",
            user_pw="user",
        )
        doc.close()
        with pytest.raises(ValidationError, match="encrypted"):
            process_document(locked, out_path, profile=ProfileConfig())
        assert not out_path.exists()
    
    def test_optimization_error(self, two_page_scan, out_path):
        with patch.object(fitz.Page, "get_images", side_effect=RuntimeError("broken resources")):
            with pytest.raises(OptimizationError, match="broken resources"):
                process_document(two_page_scan, out_path, profile=ProfileConfig())
        assert not out_path.exists()
    
    def test_extraction_error(self, two_page_scan, out_path):
        with patch.object(fitz.Document, "extract_image", side_effect=RuntimeError("bad stream")):
            with pytest.raises(ExtractionError, match="bad stream"):
                process_document(two_page_scan, out_path, profile=ProfileConfig())
        assert not out_path.exists()
    
    def test_decode_error_on_non_jpeg_image(self, tmp_path, out_path):
        src = make_scan_pdf(tmp_path / "png.pdf", [[png_bytes(BLACK)]])
        with pytest.raises(DecodeError):
            process_document(src, out_path, profile=ProfileConfig())
        assert not out_path.exists()
    
    def test_write_error_when_every_page_is_blank(self, tmp_path, out_path):
        src = make_scan_pdf(tmp_path / "blank.pdf", [[jpeg_bytes(WHITE)], [jpeg_bytes(WHITE)]])
        with pytest.raises(WriteError, match="No pages retained"):
            process_document(src, out_path, profile=ProfileConfig())
        assert not out_path.exists()

    def test_no_masks_left_when_document_fails(self, tmp_path, out_path):
        src = make_scan_pdf(tmp_path / "blank.pdf", [[jpeg_bytes(WHITE)], [jpeg_bytes(WHITE)]])
        with pytest.raises(WriteError):
            process_document(src, out_path, profile=ProfileConfig(write_masks=True))
        assert list(out_path.parent.glob("mask-*.png")) == []

    def test_write_error_on_unwritable_destination(self, two_page_scan, tmp_path):
        dest = tmp_path / "missing-dir" / "processed.pdf"
        with pytest.raises(WriteError):
            process_document(two_page_scan, dest, profile=ProfileConfig())
        assert not dest.exists()
    
    def test_errors_share_base_class(self, tmp_path, out_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"garbage")
        with pytest.raises(DocumentProcessingError) as exc_info:
            process_document(bad, out_path, profile=ProfileConfig())
        assert exc_info.value.__cause__ is not None
