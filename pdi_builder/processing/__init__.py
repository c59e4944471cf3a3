"""Image analysis, enhancement and dithering for the asset pipeline."""

from .dither import bayer_matrix, ordered_bw_dither, to_one_bit
from .enhance import apply_gamma, apply_strategy, local_contrast, normalize
from .policy import (
    dark_rescue,
    fixed_stretch,
    local_enhance,
    no_enhancement,
    select_strategy,
)
from .source import open_source, to_luma
from .stats import compute_statistics, mask_region
from .transform import fit_within, process_source, transform_image

__all__ = [
    "bayer_matrix",
    "ordered_bw_dither",
    "to_one_bit",
    "apply_gamma",
    "apply_strategy",
    "local_contrast",
    "normalize",
    "dark_rescue",
    "fixed_stretch",
    "local_enhance",
    "no_enhancement",
    "select_strategy",
    "open_source",
    "to_luma",
    "compute_statistics",
    "mask_region",
    "fit_within",
    "process_source",
    "transform_image",
]
