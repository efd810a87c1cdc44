"""Incoming file and processing job models for the batch intake loop."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path


@dataclass(frozen=True)
class IncomingFile:
    """A directory entry found by the one-time source listing."""
    
    name: str
    path: Path
    mtime: float


@dataclass
class ProcessingJob:
    """Ephemeral work item for one accepted incoming file.
    
    Attributes:
        job_id: Random UUID4 string namespacing the archive directory
        filename: Original file name in the source directory
        source_path: Path of the file in the source directory
        archive_dir: <archive_root>/<YYYY>/<MM>/<DD>/<HH>/<job_id>
        original_path: Where the source file is relocated to
        output_path: Where the trimmed document is written
    """
    
    job_id: str
    filename: str
    source_path: Path
    archive_dir: Path
    original_path: Path
    output_path: Path
    
    @classmethod
    def create(
        cls,
        incoming: IncomingFile,
        archive_root: Path,
        original_filename: str = "original.pdf",
        processed_filename: str = "processed.pdf",
    ) -> 'ProcessingJob':
        """Create a job with a fresh identifier for an incoming file."""
        job_id = str(uuid.uuid4())
        archive_dir = archive_dir_for(incoming.mtime, job_id, archive_root)
        return cls(
            job_id=job_id,
            filename=incoming.name,
            source_path=incoming.path,
            archive_dir=archive_dir,
            original_path=archive_dir / original_filename,
            output_path=archive_dir / processed_filename,
        )


def archive_dir_for(mtime: float, job_id: str, archive_root: Path) -> Path:
    """Date-partitioned archive directory for a modification time (local time, hour precision)."""
    mt = datetime.fromtimestamp(mtime)
    return (
        Path(archive_root)
        / f"{mt.year:04d}"
        / f"{mt.month:02d}"
        / f"{mt.day:02d}"
        / f"{mt.hour:02d}"
        / job_id
    )
