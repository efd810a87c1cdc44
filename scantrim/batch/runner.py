"""Batch intake: one pass over the incoming directory, one archived job per PDF."""

import logging
import os
from pathlib import Path
from typing import List, Optional

from ..config import ProfileConfig, get_profile
from ..log_fields import get_logger
from ..models.job import IncomingFile, ProcessingJob, archive_dir_for
from ..pipeline.document_pipeline import process_document

logger = logging.getLogger(__name__)
batch_log = get_logger(__name__)

SKIP_RESERVED = "reserved-suffix"
SKIP_HIDDEN = "hidden"
SKIP_EXTENSION = "not-pdf"


class SourceListingError(Exception):
    """Raised when the incoming directory cannot be listed (fatal for the run)."""
    pass


class DirectoryCreateError(Exception):
    """Raised when a job's archive directory cannot be created."""
    pass


class RelocateError(Exception):
    """Raised when an incoming file cannot be moved into its archive directory."""
    pass


def classify_entry(name: str, profile: ProfileConfig) -> Optional[str]:
    """Return why an entry is skipped, or None if it should be processed.

    Filters apply in order: reserved suffix, hidden file, wrong extension.
    """
    if any(name.endswith(suffix) for suffix in profile.reserved_suffixes):
        return SKIP_RESERVED
    if name.startswith("."):
        return SKIP_HIDDEN
    if not name.endswith(profile.pdf_extension):
        return SKIP_EXTENSION
    return None


def list_incoming(source_dir: Path) -> List[IncomingFile]:
    """List the source directory once, sorted by name.

    Raises:
        SourceListingError: If the directory cannot be read
    """
    try:
        with os.scandir(source_dir) as entries:
            found = []
            for entry in entries:
                try:
                    if not entry.is_file():
                        logger.debug("skipping non-file entry %s", entry.name)
                        continue
                    mtime = entry.stat().st_mtime
                except FileNotFoundError:
                    # Removed or renamed after the directory was read
                    logger.debug("skipping vanished entry %s", entry.name)
                    continue
                found.append(IncomingFile(name=entry.name, path=Path(entry.path), mtime=mtime))
    except OSError as e:
        raise SourceListingError(f"Cannot list incoming directory {source_dir}: {e}") from e
    return sorted(found, key=lambda f: f.name)


def make_archive_dir(job: ProcessingJob) -> Path:
    """Create the job's archive directory including all parents (idempotent)."""
    try:
        job.archive_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateError(f"Failed making directory {job.archive_dir}: {e}") from e
    return job.archive_dir


def relocate_original(job: ProcessingJob) -> Path:
    """Move the incoming file to ``<archive_dir>/original.pdf``."""
    try:
        job.source_path.rename(job.original_path)
    except OSError as e:
        raise RelocateError(
            f"Failed renaming {job.source_path} to {job.original_path}: {e}"
        ) from e
    return job.original_path


def process_entry(incoming: IncomingFile, profile: ProfileConfig) -> Optional[ProcessingJob]:
    """Archive and process one accepted file.

    Every failure is logged and ends work on this file only.

    Returns:
        The job if its trimmed output was written, None otherwise
    """
    job = ProcessingJob.create(
        incoming,
        Path(profile.archive_root),
        original_filename=profile.original_filename,
        processed_filename=profile.processed_filename,
    )
    log = batch_log.bind(file=incoming.name, fileId=job.job_id)
    log.info("start processing pdf file")

    try:
        make_archive_dir(job)
    except DirectoryCreateError as e:
        log.warning("failed making directory", fields={"directory": str(job.archive_dir), "error": e})
        return None

    try:
        relocate_original(job)
    except RelocateError as e:
        log.warning("failed renaming file", fields={"directory": str(job.archive_dir), "error": e})
        return None

    try:
        process_document(job.original_path, job.output_path, profile=profile, log=log)
    except Exception as e:
        log.warning(
            "failed processing pdf file",
            fields={"error": f"{type(e).__name__}: {e}"},
            exc_info=logger.isEnabledFor(logging.DEBUG),
        )
        return None

    log.info("finished processing pdf file", fields={"output": str(job.output_path)})
    return job


def run_batch(profile: Optional[ProfileConfig] = None) -> None:
    """Process every PDF currently present in the incoming directory.

    The directory is listed once; files are handled strictly one at a time.
    Failures affect only the file they occur on. Results are observable in
    the archive directory and the log.

    Args:
        profile: Configuration (active profile if None)

    Raises:
        SourceListingError: If the incoming directory cannot be listed
    """
    profile = profile or get_profile()
    source_dir = Path(profile.source_dir)

    incoming = list_incoming(source_dir)
    logger.info("Found %s entries in %s", len(incoming), source_dir)

    for entry in incoming:
        reason = classify_entry(entry.name, profile)
        if reason == SKIP_EXTENSION:
            batch_log.bind(file=entry.name).info("skipping non-pdf file")
            continue
        if reason is not None:
            logger.debug("skipping %s (%s)", entry.name, reason)
            continue

        process_entry(entry, profile)


__all__ = [
    "DirectoryCreateError",
    "RelocateError",
    "SourceListingError",
    "archive_dir_for",
    "classify_entry",
    "list_incoming",
    "make_archive_dir",
    "process_entry",
    "relocate_original",
    "run_batch",
]
