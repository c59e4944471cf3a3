from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..config import PACKAGE_SUFFIX, PLACEHOLDER_PROGRAM
from ..errors import CompilerError, MissingToolError

logger = logging.getLogger("pdi_builder.toolchain")

Which = Callable[[str], Optional[str]]


def require_tool(name: str, *, which: Optional[Which] = None, hint: str = "") -> str:
    """Return the absolute path of ``name`` or raise :class:`MissingToolError`."""
    resolved = (which or shutil.which)(name)
    if not resolved:
        raise MissingToolError(name, hint)
    return resolved


def write_placeholder_program(staging_dir: Path) -> Path:
    """Create the empty program file ``pdc`` expects in its input directory."""
    placeholder = Path(staging_dir) / PLACEHOLDER_PROGRAM
    placeholder.touch()
    return placeholder


def package_path_for(staging_dir: Path) -> Path:
    staging_dir = Path(staging_dir)
    return staging_dir.with_name(staging_dir.name + PACKAGE_SUFFIX)


class PdcCompiler:
    """Thin wrapper around the Playdate SDK compiler."""

    def __init__(self, executable: str = "pdc", extra_args: Sequence[str] = ()) -> None:
        self.executable = executable
        self.extra_args = tuple(extra_args)

    def ensure_available(self) -> str:
        return require_tool(self.executable, hint="Install the Playdate SDK and add its bin folder to PATH.")

    def compile(self, staging_dir: Path) -> Path:
        staging_dir = Path(staging_dir)
        package_dir = package_path_for(staging_dir)
        cmd = [self.executable, *self.extra_args, str(staging_dir), str(package_dir)]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise CompilerError(f"Could not launch {self.executable}: {exc}") from exc
        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip()
            raise CompilerError(
                f"{self.executable} exited with status {proc.returncode}" + (f": {detail}" if detail else "")
            )
        if not package_dir.is_dir():
            raise CompilerError(f"{self.executable} did not produce {package_dir}")
        return package_dir
