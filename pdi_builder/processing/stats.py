from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageStat

from ..config import SETTINGS, BuilderSettings
from ..models import ImageStatistics
from .source import open_source, to_luma


def mask_region(gray: Image.Image, percent: float) -> Image.Image:
    """Drop the leftmost ``percent`` of columns from ``gray``.

    Used for box-art style frames where a fixed banner would skew the
    brightness sample. At least one column is always kept.
    """
    if percent <= 0:
        return gray
    width, height = gray.size
    cut = min(int(width * percent / 100.0), width - 1)
    if cut <= 0:
        return gray
    return gray.crop((cut, 0, width, height))


def measure(gray: Image.Image, mask_percent: float = 0.0) -> tuple[float, float]:
    sample = mask_region(gray, mask_percent)
    stat = ImageStat.Stat(sample)
    return stat.mean[0] / 255.0, stat.stddev[0] / 255.0


def compute_statistics(
    source: Path | Image.Image,
    mask_percent: float | None = None,
    settings: BuilderSettings = SETTINGS,
    *,
    source_path: Path | None = None,
) -> ImageStatistics:
    """Return mean/stddev of the luma channel, normalized to ``[0, 1]``.

    ``source`` may be a path (decoded here, raising ``DecodeError``) or an
    already decoded image, in which case ``source_path`` names it.
    """
    percent = settings.mask_percent if mask_percent is None else mask_percent
    if isinstance(source, Image.Image):
        img = source
        path = source_path or Path(getattr(source, "filename", "") or "<memory>")
    else:
        path = Path(source)
        img = open_source(path)

    mean, stddev = measure(to_luma(img), percent)
    return ImageStatistics(
        mean=min(1.0, max(0.0, mean)),
        stddev=min(1.0, max(0.0, stddev)),
        source_path=path,
    )
