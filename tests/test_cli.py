"""Unit tests for the CLI interface."""

import argparse
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from scan_builders import BLACK, WHITE, jpeg_bytes, make_scan_pdf, page_count
from scantrim.cli.check_deps import check_dependencies, run_check
from scantrim.cli.main import build_parser, build_profile, main
from scantrim.config import get_profile


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])


class TestBuildProfile:
    """Test profile resolution and overrides."""
    
    def test_overrides(self, tmp_path):
        args = build_parser().parse_args([
            "--source-dir", str(tmp_path / "in"),
            "--archive-root", str(tmp_path / "out"),
            "--threshold", "2.5",
            "--retention-rule", "any",
            "--write-masks",
        ])
        profile = build_profile(args)
        assert profile.source_dir == str(tmp_path / "in")
        assert profile.archive_root == str(tmp_path / "out")
        assert profile.blank_coverage_threshold == 2.5
        assert profile.retention_rule == "any"
        assert profile.write_masks is True
    
    def test_profile_file(self, tmp_path):
        path = tmp_path / "p.yaml"
        path.write_text("name: from-file\nblank_coverage_threshold: 3\n")
        profile = build_profile(build_parser().parse_args(["--profile-file", str(path)]))
        assert profile.name == "from-file"
        assert profile.blank_coverage_threshold == 3.0
    
    def test_invalid_threshold_override(self):
        args = build_parser().parse_args(["--threshold", "-1"])
        with pytest.raises(ValueError):
            build_profile(args)


class TestMain:
    """Test CLI modes end to end."""
    
    def test_batch_mode(self, tmp_path):
        source = tmp_path / "incoming"
        archive = tmp_path / "scans"
        source.mkdir()
        make_scan_pdf(source / "scan.pdf", [[jpeg_bytes(BLACK)], [jpeg_bytes(WHITE)]])
        
        main(["--source-dir", str(source), "--archive-root", str(archive)])
        
        outputs = list(archive.rglob("processed.pdf"))
        assert len(outputs) == 1
        assert page_count(outputs[0]) == 1
        assert get_profile().source_dir == str(source)
    
    def test_missing_source_dir_exits_nonzero(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--source-dir", str(tmp_path / "missing"), "--archive-root", str(tmp_path / "a")])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err
    
    def test_single_file_mode(self, tmp_path, capsys):
        src = make_scan_pdf(tmp_path / "in.pdf", [[jpeg_bytes(BLACK)], [jpeg_bytes(WHITE)]])
        out = tmp_path / "result" / "trimmed.pdf"
        
        main([str(src), "--output", str(out)])
        
        assert page_count(out) == 1
        assert src.exists()  # not relocated
        assert "kept 1/2 pages" in capsys.readouterr().out
    
    def test_single_file_failure_exits_nonzero(self, tmp_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"garbage")
        with pytest.raises(SystemExit) as exc_info:
            main([str(bad), "--output", str(tmp_path / "o.pdf")])
        assert exc_info.value.code == 1
    
    def test_mask_mode(self, tmp_path, capsys):
        image_path = tmp_path / "page.jpg"
        image_path.write_bytes(jpeg_bytes(BLACK, size=(16, 16)))
        
        main(["--mask", str(image_path)])
        
        mask_path = tmp_path / "page-mask.png"
        assert mask_path.exists()
        with Image.open(mask_path) as mask:
            assert mask.size == (16, 16)
            assert mask.getpixel((8, 8)) == 0
        assert "keep=True" in capsys.readouterr().out
    
    def test_mask_and_input_conflict(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "a.pdf"), "--mask", str(tmp_path / "b.jpg")])
        assert exc_info.value.code == 2
    
    @patch("scantrim.cli.check_deps.run_check", return_value=True)
    def test_check_deps_flag(self, mock_check):
        with pytest.raises(SystemExit) as exc_info:
            main(["--check-deps"])
        assert exc_info.value.code == 0
        mock_check.assert_called_once()


class TestCheckDeps:
    """Test dependency verification."""
    
    def test_all_dependencies_present(self):
        results = check_dependencies()
        names = [name for name, _, _ in results]
        assert names == ["pymupdf (fitz)", "Pillow (PIL)", "PyYAML"]
        assert all(ok for _, ok, _ in results)
    
    def test_run_check_report(self, capsys):
        assert run_check(verbose=True) is True
        assert "All checked dependencies are available." in capsys.readouterr().out
