"""Shared pytest fixtures."""

import pytest

from scan_builders import BLACK, WHITE, jpeg_bytes, make_scan_pdf
from scantrim.config import ProfileConfig, reset_profile


@pytest.fixture
def two_page_scan(tmp_path):
    """Page 1 carries a black (all ink) image, page 2 a white (blank) one."""
    return make_scan_pdf(
        tmp_path / "scan.pdf",
        [[jpeg_bytes(BLACK)], [jpeg_bytes(WHITE)]],
    )


@pytest.fixture
def intake_dirs(tmp_path):
    """(profile, source_dir, archive_root) for a batch run inside tmp_path."""
    source_dir = tmp_path / "incoming"
    archive_root = tmp_path / "scans"
    source_dir.mkdir()
    profile = ProfileConfig(
        name="test",
        source_dir=str(source_dir),
        archive_root=str(archive_root),
    )
    return profile, source_dir, archive_root


@pytest.fixture(autouse=True)
def _reset_active_profile():
    reset_profile()
    yield
    reset_profile()
