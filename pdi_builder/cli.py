from __future__ import annotations

import logging
import sys
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import click

from . import __version__
from .config import DITHER_ORDERS, SETTINGS, configure_logging
from .errors import CompilerError, MissingToolError, WorkspaceError
from .pipeline.runner import run

logger = logging.getLogger("pdi_builder.cli")


def _parse_pair(value: Optional[str], separator: str = "x") -> Optional[Tuple[str, str]]:
    if value is None:
        return None
    left, sep, right = value.lower().rstrip("%").partition(separator)
    if not sep or not left or not right:
        raise click.BadParameter(f"expected <a>{separator}<b>, got '{value}'")
    return left, right.rstrip("%")


def _parse_size(ctx, param, value: Optional[str]) -> Optional[Tuple[int, int]]:
    pair = _parse_pair(value)
    if pair is None:
        return None
    try:
        return int(pair[0]), int(pair[1])
    except ValueError as exc:
        raise click.BadParameter(f"invalid size '{value}'") from exc


def _parse_local_contrast(ctx, param, value: Optional[str]) -> Optional[Tuple[float, int]]:
    pair = _parse_pair(value)
    if pair is None:
        return None
    try:
        return float(pair[0]), int(pair[1])
    except ValueError as exc:
        raise click.BadParameter(f"invalid local contrast '{value}'") from exc


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False), default=SETTINGS.source_dir)
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False), default=SETTINGS.output_dir, show_default=True, help="Final folder holding only compiled assets.")
@click.option("--build-dir", type=click.Path(file_okay=False), default=SETTINGS.build_dir, show_default=True, help="Temporary staging folder handed to the compiler.")
@click.option("--max-size", callback=_parse_size, default=None, help="Bounding box WxH images are scaled down into. [default: 240x240]")
@click.option("--dark-threshold", type=click.FloatRange(0.0, 1.0), default=None, help="Mean brightness at or below which an image is treated as dark.")
@click.option("--low-contrast-threshold", type=click.FloatRange(0.0, 1.0), default=None, help="Standard deviation at or below which an image is treated as flat.")
@click.option("--gamma", type=click.FloatRange(min=0.0, min_open=True), default=None, help="Gamma lift used to rescue dark images.")
@click.option("--local-contrast", callback=_parse_local_contrast, default=None, help="Local contrast RADIUSxSTRENGTH%, e.g. 10x30%.")
@click.option("--mask-percent", type=click.FloatRange(0.0, 100.0, max_open=True), default=None, help="Ignore this percent of the width from the left when measuring brightness.")
@click.option("--dither-order", type=click.Choice([str(order) for order in DITHER_ORDERS]), default=None, help="Bayer matrix size for ordered dithering.")
@click.option("--fixed/--adaptive", "fixed", default=None, help="Apply a plain contrast stretch to every image instead of the adaptive policy.")
@click.option("--workers", "-j", type=click.IntRange(min=0), default=None, help="Maximum parallel conversions; 0 uses every CPU.")
@click.option("--threads", is_flag=True, default=False, help="Use worker threads instead of processes.")
@click.option("--keep-build", is_flag=True, default=False, help="Keep the staging folder and package for inspection.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    source_dir: str,
    output_dir: str,
    build_dir: str,
    max_size: Optional[Tuple[int, int]],
    dark_threshold: Optional[float],
    low_contrast_threshold: Optional[float],
    gamma: Optional[float],
    local_contrast: Optional[Tuple[float, int]],
    mask_percent: Optional[float],
    dither_order: Optional[str],
    fixed: Optional[bool],
    workers: Optional[int],
    threads: bool,
    keep_build: bool,
    verbose: bool,
) -> None:
    """Convert the PNG images in SOURCE_DIR into compiled Playdate .pdi assets.

    Each image is analysed, enhanced according to its brightness and
    contrast, scaled down, ordered-dithered to 1-bit and compiled with pdc.
    Only the resulting .pdi files are kept.
    """
    configure_logging("DEBUG" if verbose else None)

    overrides: Dict[str, Any] = {
        "source_dir": source_dir,
        "output_dir": output_dir,
        "build_dir": build_dir,
    }
    if max_size is not None:
        overrides["max_width"], overrides["max_height"] = max_size
    if dark_threshold is not None:
        overrides["dark_mean_threshold"] = dark_threshold
    if low_contrast_threshold is not None:
        overrides["low_contrast_stddev_threshold"] = low_contrast_threshold
    if gamma is not None:
        overrides["gamma"] = gamma
    if local_contrast is not None:
        overrides["local_contrast_radius"], overrides["local_contrast_strength"] = local_contrast
    if mask_percent is not None:
        overrides["mask_percent"] = mask_percent
    if dither_order is not None:
        overrides["dither_order"] = int(dither_order)
    if fixed is not None:
        overrides["adaptive"] = not fixed
    if workers is not None:
        overrides["max_workers"] = workers
    if threads:
        overrides["use_processes"] = False
    if keep_build:
        overrides["keep_build"] = True

    try:
        settings = replace(SETTINGS, **overrides)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    try:
        result = run(settings, report=click.echo)
    except WorkspaceError as exc:
        raise click.UsageError(str(exc)) from exc
    except (MissingToolError, CompilerError) as exc:
        click.echo(f"Error: {exc} Aborting.", err=True)
        sys.exit(1)

    summary = result.summary
    click.echo()
    click.echo("----------------------------------------------------")
    click.echo(
        f"Converted: {summary.succeeded} succeeded, {summary.failed} failed; "
        f"{result.assets} assets in {result.output_dir}/"
    )
    click.echo("----------------------------------------------------")


if __name__ == "__main__":  # pragma: no cover
    main()
