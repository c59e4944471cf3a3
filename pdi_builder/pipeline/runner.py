from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from ..config import SETTINGS, BuilderSettings
from ..infrastructure.extract import extract_assets
from ..infrastructure.toolchain import PdcCompiler, write_placeholder_program
from ..infrastructure.workspace import WorkspaceLayout, check_layout, cleanup_workspace, prepare_workspace
from ..models import BatchSummary
from .batch import run_batch

logger = logging.getLogger("pdi_builder.runner")

Reporter = Callable[[str], None]


class Compiler(Protocol):
    def ensure_available(self) -> str: ...

    def compile(self, staging_dir: Path) -> Path: ...


@dataclass(frozen=True)
class RunReport:
    summary: BatchSummary
    assets: int
    output_dir: Path


def run(
    settings: BuilderSettings = SETTINGS,
    compiler: Optional[Compiler] = None,
    report: Reporter = logger.info,
) -> RunReport:
    """Convert, compile and extract; returns the batch summary and asset count.

    Raises ``WorkspaceError`` when the build or output folder would remove
    the sources, ``MissingToolError`` before touching the filesystem when the
    compiler is unavailable, and ``CompilerError`` when packaging fails.
    """
    layout = WorkspaceLayout.from_settings(settings)
    check_layout(layout, Path(settings.source_dir))

    compiler = compiler or PdcCompiler(settings.compiler)
    compiler.ensure_available()

    report("STEP 1/5: Preparing directories...")
    prepare_workspace(layout)

    try:
        report("STEP 2/5: Resizing and dithering PNGs...")
        summary = run_batch(Path(settings.source_dir), layout.build_dir, settings)

        assets = 0
        if summary.succeeded:
            report("STEP 3/5: Compiling assets into a package...")
            write_placeholder_program(layout.build_dir)
            package_dir = compiler.compile(layout.build_dir)

            report("STEP 4/5: Extracting compiled assets from the package...")
            assets = extract_assets(package_dir, layout.output_dir)
        else:
            report("STEP 3/5: Nothing to compile, skipping packaging.")
    finally:
        if settings.keep_build:
            logger.info("Keeping build artifacts in %s", layout.build_dir)
        else:
            report("STEP 5/5: Cleaning up temporary files...")
            cleanup_workspace(layout)

    return RunReport(summary=summary, assets=assets, output_dir=layout.output_dir)
