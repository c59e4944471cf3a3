"""Error taxonomy for the asset pipeline.

Per-image errors (:class:`DecodeError`, :class:`TransformError`) are recovered
by the batch and reported as failed outcomes. :class:`MissingToolError` and
:class:`CompilerError` abort the whole run.
"""

from __future__ import annotations


class PdiBuilderError(Exception):
    """Base class for all pipeline errors."""


class MissingToolError(PdiBuilderError):
    """A required external tool is not available on ``PATH``."""

    def __init__(self, tool: str, hint: str = "") -> None:
        message = f"Required tool '{tool}' was not found in PATH."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.tool = tool


class DecodeError(PdiBuilderError):
    """A source image could not be read or parsed."""


class TransformError(PdiBuilderError):
    """An enhancement or dithering step failed for one image."""


class CompilerError(PdiBuilderError):
    """The external packaging compiler failed or produced no package."""


class WorkspaceError(PdiBuilderError, ValueError):
    """Build or output folders would overlap the source images."""
