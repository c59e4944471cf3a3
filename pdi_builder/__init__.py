"""Playdate image asset builder."""

APP_VERSION = "1.2.0"
__version__ = APP_VERSION

from . import infrastructure, pipeline, processing  # noqa: E402
from .config import SETTINGS, BuilderSettings  # noqa: E402

__all__ = [
    "APP_VERSION",
    "__version__",
    "SETTINGS",
    "BuilderSettings",
    "infrastructure",
    "pipeline",
    "processing",
]
