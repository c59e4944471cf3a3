from __future__ import annotations

from ..config import SETTINGS, BuilderSettings
from ..models import EnhancementStep, EnhancementStrategy, ImageStatistics, StrategyKind

DARK_RESCUE_LABEL = "Dark Image Rescue"
LOCAL_ENHANCE_LABEL = "Local Enhance"
NONE_LABEL = "None"
FIXED_STRETCH_LABEL = "Contrast Stretch"


def _local_contrast_step(settings: BuilderSettings) -> EnhancementStep:
    return EnhancementStep(
        "local_contrast",
        (
            ("radius", settings.local_contrast_radius),
            ("strength", settings.local_contrast_strength),
        ),
    )


def _normalize_step(cutoff: float) -> EnhancementStep:
    return EnhancementStep("normalize", (("cutoff", cutoff),))


def dark_rescue(settings: BuilderSettings = SETTINGS) -> EnhancementStrategy:
    return EnhancementStrategy(
        StrategyKind.DARK_RESCUE,
        DARK_RESCUE_LABEL,
        (
            EnhancementStep("gamma", (("gamma", settings.gamma),)),
            _normalize_step(settings.normalize_cutoff_percent),
            _local_contrast_step(settings),
        ),
    )


def local_enhance(settings: BuilderSettings = SETTINGS) -> EnhancementStrategy:
    return EnhancementStrategy(
        StrategyKind.LOCAL_ENHANCE,
        LOCAL_ENHANCE_LABEL,
        (
            _normalize_step(settings.normalize_cutoff_percent),
            _local_contrast_step(settings),
        ),
    )


def no_enhancement() -> EnhancementStrategy:
    return EnhancementStrategy(StrategyKind.NONE, NONE_LABEL, ())


def fixed_stretch(settings: BuilderSettings = SETTINGS) -> EnhancementStrategy:
    return EnhancementStrategy(
        StrategyKind.FIXED_STRETCH,
        FIXED_STRETCH_LABEL,
        (_normalize_step(settings.contrast_stretch_percent),),
    )


def select_strategy(stats: ImageStatistics, settings: BuilderSettings = SETTINGS) -> EnhancementStrategy:
    """Map image statistics to an enhancement strategy.

    Dark images get a gamma lift before local contrast, since local contrast
    alone amplifies noise without recovering shadows. Flat but well exposed
    images only get a normalize and local contrast pass. Everything else is
    dithered as is.
    """
    if not settings.adaptive:
        return fixed_stretch(settings)
    if stats.mean <= settings.dark_mean_threshold:
        return dark_rescue(settings)
    if stats.stddev <= settings.low_contrast_stddev_threshold:
        return local_enhance(settings)
    return no_enhancement()
