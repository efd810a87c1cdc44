"""CLI interface for blank page trimming of incoming scans.

Usage:
    scantrim                              # one batch pass with the default profile
    scantrim --profile office --verbose
    scantrim --source-dir ./incoming --archive-root ./scans
    scantrim scan.pdf --output trimmed.pdf  # single file, no archiving
    scantrim --mask page.jpg                # write the coverage mask of one JPEG
    scantrim --check-deps
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import (
    RETENTION_RULES,
    ProfileConfig,
    get_app_name,
    get_app_version,
    get_default_profile,
    load_profile,
    load_profile_file,
    use_profile,
)
from ..log_fields import get_logger, setup_logging
from ..pipeline.coverage import estimate_coverage
from ..pipeline.images import decode_jpeg
from ..pipeline.retention import should_keep_page

logger = logging.getLogger(__name__)

DEFAULT_SINGLE_OUTPUT = "output.pdf"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=get_app_name(),
        description="Strip blank scanned pages from incoming PDFs and archive them by date",
    )
    
    parser.add_argument(
        "input",
        nargs="?",
        help="Process a single PDF without archiving (writes --output, default output.pdf)"
    )
    
    parser.add_argument(
        "--output",
        help="Output path for single-file or --mask mode"
    )
    
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        help="Configuration profile name (default: $SCANTRIM_PROFILE or 'default')"
    )
    
    parser.add_argument(
        "--profile-file",
        type=Path,
        help="Load configuration from this YAML file instead of a named profile"
    )
    
    parser.add_argument("--source-dir", help="Incoming directory to scan")
    parser.add_argument("--archive-root", help="Root of the dated archive tree")
    
    parser.add_argument(
        "--threshold",
        type=float,
        help="Blank coverage threshold in percent (pages below are dropped)"
    )
    
    parser.add_argument(
        "--retention-rule",
        choices=RETENTION_RULES,
        help="How images on one page are combined: all, any or last"
    )
    
    parser.add_argument(
        "--write-masks",
        action="store_true",
        help="Save the coverage mask of every page image next to the output"
    )
    
    parser.add_argument(
        "--strict-validation",
        action="store_true",
        help="Reject PDFs whose cross-reference table needed repair"
    )
    
    parser.add_argument(
        "--mask",
        type=Path,
        help="Compute coverage of a single JPEG and write its mask (default: <name>-mask.png)"
    )
    
    parser.add_argument(
        "--check-deps",
        action="store_true",
        help="Verify that required libraries are installed"
    )
    
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging"
    )
    
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a detailed rotating log file"
    )
    
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_app_version()}"
    )
    
    return parser


def build_profile(args: argparse.Namespace) -> ProfileConfig:
    """Resolve the profile from arguments and apply command-line overrides.
    
    Raises:
        FileNotFoundError: If a requested profile does not exist
        ValueError: If the profile or an override is invalid
    """
    if args.profile_file:
        profile = load_profile_file(args.profile_file)
    elif args.profile:
        profile = load_profile(args.profile)
    else:
        profile = get_default_profile()
    
    overrides = {}
    if args.source_dir:
        overrides["source_dir"] = args.source_dir
    if args.archive_root:
        overrides["archive_root"] = args.archive_root
    if args.threshold is not None:
        overrides["blank_coverage_threshold"] = args.threshold
    if args.retention_rule:
        overrides["retention_rule"] = args.retention_rule
    if args.write_masks:
        overrides["write_masks"] = True
    if args.strict_validation:
        overrides["strict_validation"] = True
    
    if overrides:
        profile = dataclasses.replace(profile, **overrides)
    return profile


def _handle_mask(args: argparse.Namespace, profile: ProfileConfig) -> None:
    image_path = args.mask
    output = Path(args.output) if args.output else image_path.with_name(f"{image_path.stem}-mask.png")
    
    with decode_jpeg(image_path.read_bytes()) as image:
        result, mask = estimate_coverage(image, profile.near_white_level)
    mask.save(output)
    
    keep = should_keep_page(result.coverage, profile.blank_coverage_threshold)
    get_logger(__name__, file=image_path.name).info(
        "calculated coverage",
        fields={"bounds": result.bounds, "coverage": f"{result.coverage:.4f}", "keep": keep},
    )
    print(f"{image_path.name}: coverage={result.coverage:.4f}% keep={keep} mask={output}")


def _handle_single(args: argparse.Namespace, profile: ProfileConfig) -> None:
    from ..pipeline.document_pipeline import process_document
    
    output = Path(args.output or DEFAULT_SINGLE_OUTPUT)
    output.parent.mkdir(parents=True, exist_ok=True)
    log = get_logger(__name__, file=Path(args.input).name)
    document = process_document(args.input, output, profile=profile, log=log)
    kept = document.kept_pages()
    print(f"{document.filename}: kept {len(kept)}/{document.page_count} pages -> {output}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if args.check_deps:
        from .check_deps import run_check
        sys.exit(0 if run_check(verbose=True) else 1)
    
    if args.input and args.mask:
        parser.error("a PDF input and --mask cannot be combined")
    
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    
    try:
        profile = use_profile(build_profile(args))
        logger.debug("Using profile %s: %s", profile.name, profile.to_dict())
        
        if args.mask:
            _handle_mask(args, profile)
        elif args.input:
            _handle_single(args, profile)
        else:
            from ..batch.runner import run_batch
            run_batch(profile)
    except Exception as e:
        logger.debug("Fatal error", exc_info=True)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
