"""Batch intake of incoming scans."""

from .runner import run_batch

__all__ = ["run_batch"]
