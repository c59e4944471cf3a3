"""Batch coordination and end-to-end run orchestration."""

from .batch import discover_sources, resolve_workers, run_batch
from .runner import RunReport, run

__all__ = ["discover_sources", "resolve_workers", "run_batch", "RunReport", "run"]
