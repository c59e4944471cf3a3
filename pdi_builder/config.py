import logging
import os
from dataclasses import dataclass
from typing import Tuple

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

ASSET_EXTENSION = ".pdi"
PACKAGE_SUFFIX = ".pdx"
PLACEHOLDER_PROGRAM = "main.lua"
DITHER_ORDERS: Tuple[int, ...] = (2, 4, 8)


@dataclass(frozen=True)
class BuilderSettings:
    source_dir: str = "."
    output_dir: str = "__final_pdi_assets"
    build_dir: str = "__build_temp"
    max_width: int = 240
    max_height: int = 240
    dark_mean_threshold: float = 0.25
    low_contrast_stddev_threshold: float = 0.15
    gamma: float = 1.8
    normalize_cutoff_percent: float = 2.0
    local_contrast_radius: float = 10.0
    local_contrast_strength: int = 30
    mask_percent: float = 0.0
    dither_order: int = 4
    adaptive: bool = True
    contrast_stretch_percent: float = 2.0
    max_workers: int = 0
    use_processes: bool = True
    keep_build: bool = False
    compiler: str = "pdc"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_width < 1 or self.max_height < 1:
            raise ValueError(f"Invalid max size {self.max_width}x{self.max_height}")
        for name in ("dark_mean_threshold", "low_contrast_stddev_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.gamma <= 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if not 0.0 <= self.mask_percent < 100.0:
            raise ValueError(f"mask_percent must be within [0, 100), got {self.mask_percent}")
        for name in ("normalize_cutoff_percent", "contrast_stretch_percent"):
            value = getattr(self, name)
            if not 0.0 <= value < 50.0:
                raise ValueError(f"{name} must be within [0, 50), got {value}")
        if self.local_contrast_radius < 0 or self.local_contrast_strength < 0:
            raise ValueError("local contrast radius and strength must not be negative")
        if self.dither_order not in DITHER_ORDERS:
            raise ValueError(f"dither_order must be one of {DITHER_ORDERS}, got {self.dither_order}")
        if self.max_workers < 0:
            raise ValueError(f"max_workers must not be negative, got {self.max_workers}")

    @property
    def max_size(self) -> Tuple[int, int]:
        return self.max_width, self.max_height

    @classmethod
    def from_env(cls) -> "BuilderSettings":
        return cls(
            source_dir=os.getenv("PDI_SOURCE_DIR", "."),
            output_dir=os.getenv("PDI_OUTPUT_DIR", "__final_pdi_assets"),
            build_dir=os.getenv("PDI_BUILD_DIR", "__build_temp"),
            max_width=int(os.getenv("PDI_MAX_WIDTH", "240")),
            max_height=int(os.getenv("PDI_MAX_HEIGHT", "240")),
            dark_mean_threshold=float(os.getenv("PDI_DARK_MEAN_THR", "0.25")),
            low_contrast_stddev_threshold=float(os.getenv("PDI_LOW_CONTRAST_THR", "0.15")),
            gamma=float(os.getenv("PDI_GAMMA", "1.8")),
            normalize_cutoff_percent=float(os.getenv("PDI_NORMALIZE_CUTOFF", "2.0")),
            local_contrast_radius=float(os.getenv("PDI_LOCAL_CONTRAST_RADIUS", "10")),
            local_contrast_strength=int(os.getenv("PDI_LOCAL_CONTRAST_STRENGTH", "30")),
            mask_percent=float(os.getenv("PDI_MASK_PERCENT", "0")),
            dither_order=int(os.getenv("PDI_DITHER_ORDER", "4")),
            adaptive=_env_flag("PDI_ADAPTIVE", True),
            contrast_stretch_percent=float(os.getenv("PDI_CONTRAST_STRETCH", "2.0")),
            max_workers=int(os.getenv("PDI_MAX_WORKERS", "0")),
            use_processes=_env_flag("PDI_USE_PROCESSES", True),
            keep_build=_env_flag("PDI_KEEP_BUILD", False),
            compiler=os.getenv("PDI_COMPILER", "pdc"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


SETTINGS = BuilderSettings.from_env()


def configure_logging(level: str | int | None = None) -> logging.Logger:
    logging.basicConfig(level=level or SETTINGS.log_level, format=LOG_FORMAT)
    return logging.getLogger("pdi_builder")
