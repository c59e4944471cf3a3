from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

from PIL import Image

from ..config import SETTINGS, BuilderSettings
from ..errors import DecodeError, TransformError
from ..models import EnhancementStrategy, OutcomeStatus, ProcessingOutcome
from .dither import ordered_bw_dither, to_one_bit
from .enhance import apply_strategy
from .policy import select_strategy
from .source import open_source, to_luma
from .stats import compute_statistics

logger = logging.getLogger("pdi_builder.transform")


def fit_within(img: Image.Image, box: Tuple[int, int]) -> Image.Image:
    """Scale ``img`` down to fit ``box`` keeping its aspect ratio. Never upscales."""
    max_w, max_h = box
    width, height = img.size
    if width <= max_w and height <= max_h:
        return img
    ratio = min(max_w / width, max_h / height)
    size = (max(1, round(width * ratio)), max(1, round(height * ratio)))
    return img.resize(size, Image.Resampling.LANCZOS)


def transform_image(
    img: Image.Image,
    strategy: EnhancementStrategy,
    settings: BuilderSettings = SETTINGS,
) -> Image.Image:
    """Resize, grayscale, enhance and dither ``img`` into a 1-bit image."""
    resized = fit_within(img, settings.max_size)
    gray = to_luma(resized)
    enhanced = apply_strategy(gray, strategy)
    try:
        return to_one_bit(ordered_bw_dither(enhanced, settings.dither_order))
    except (ValueError, OSError) as exc:
        raise TransformError(f"Dithering failed: {exc}") from exc


def process_source(
    path: Path,
    staging_dir: Path,
    settings: BuilderSettings = SETTINGS,
) -> ProcessingOutcome:
    """Run stats, policy and transform for one source image.

    Never raises for image-level problems; they come back as a failed outcome
    so the rest of the batch is unaffected.
    """
    path = Path(path)
    stats = None
    label = None
    try:
        img = open_source(path)
        stats = compute_statistics(img, settings.mask_percent, settings, source_path=path)
        strategy = select_strategy(stats, settings)
        label = strategy.label
        result = transform_image(img, strategy, settings)
        destination = Path(staging_dir) / path.name
        result.save(destination, "PNG", optimize=True)
    except (DecodeError, TransformError, OSError, ValueError) as exc:
        logger.debug("Conversion of %s failed", path.name, exc_info=True)
        return ProcessingOutcome(
            source_path=path,
            status=OutcomeStatus.FAILURE,
            statistics=stats,
            strategy_label=label,
            error=str(exc),
        )

    return ProcessingOutcome(
        source_path=path,
        status=OutcomeStatus.SUCCESS,
        statistics=stats,
        strategy_label=label,
        output_path=destination,
    )
