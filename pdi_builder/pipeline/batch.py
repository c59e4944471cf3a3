from __future__ import annotations

import logging
import os
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional

from ..config import SETTINGS, BuilderSettings
from ..models import BatchSummary, OutcomeStatus, ProcessingOutcome
from ..processing.transform import process_source

logger = logging.getLogger("pdi_builder.batch")

SOURCE_SUFFIX = ".png"


def discover_sources(source_dir: Path) -> List[Path]:
    """List PNG files directly inside ``source_dir`` (no recursion), sorted by name."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        return []
    return sorted(
        (entry for entry in source_dir.iterdir() if entry.is_file() and entry.suffix.lower() == SOURCE_SUFFIX),
        key=lambda entry: entry.name,
    )


def resolve_workers(requested: Optional[int], pending: int) -> int:
    if requested:
        limit = max(1, int(requested))
    else:
        limit = max(1, int(os.cpu_count() or 4))
    return max(1, min(limit, pending))


def _create_executor(workers: int, use_processes: bool) -> Executor:
    if use_processes:
        return ProcessPoolExecutor(max_workers=workers)
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pdi-convert")


def _describe(outcome: ProcessingOutcome) -> str:
    if outcome.ok and outcome.statistics is not None:
        stats = outcome.statistics
        return (
            f"{outcome.source_path.name}: mean={stats.mean:.3f} stddev={stats.stddev:.3f} "
            f"-> {outcome.strategy_label}"
        )
    return f"{outcome.source_path.name}: FAILED ({outcome.error})"


def run_batch(
    source_dir: Path,
    staging_dir: Path,
    settings: BuilderSettings = SETTINGS,
    max_workers: Optional[int] = None,
) -> BatchSummary:
    """Convert every source image in ``source_dir`` into ``staging_dir``.

    Individual failures are recorded in the summary and never abort the batch.
    """
    sources = discover_sources(source_dir)
    if not sources:
        logger.info("No PNG images found in %s", source_dir)
        return BatchSummary()

    staging_dir = Path(staging_dir)
    staging_dir.mkdir(parents=True, exist_ok=True)

    requested = settings.max_workers if max_workers is None else max_workers
    workers = resolve_workers(requested, len(sources))
    logger.debug("Converting %d images with %d workers", len(sources), workers)

    outcomes: List[ProcessingOutcome] = []
    with _create_executor(workers, settings.use_processes) as executor:
        futures: Dict[Future[ProcessingOutcome], Path] = {
            executor.submit(process_source, path, staging_dir, settings): path for path in sources
        }
        for fut in as_completed(futures):
            path = futures[fut]
            try:
                outcome = fut.result()
            except Exception as exc:  # noqa: BLE001 - worker crash counts against this image only
                outcome = ProcessingOutcome(source_path=path, status=OutcomeStatus.FAILURE, error=str(exc))
            outcomes.append(outcome)
            if outcome.ok:
                logger.info("  -> %s", _describe(outcome))
            else:
                logger.warning("  -> %s", _describe(outcome))

    summary = BatchSummary.from_outcomes(outcomes)
    logger.info("Batch complete: %d succeeded, %d failed", summary.succeeded, summary.failed)
    return summary
