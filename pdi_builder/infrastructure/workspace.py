from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from ..config import SETTINGS, BuilderSettings
from ..errors import WorkspaceError
from .toolchain import package_path_for


@dataclass(frozen=True)
class WorkspaceLayout:
    build_dir: Path
    package_dir: Path
    output_dir: Path

    @classmethod
    def from_settings(cls, settings: BuilderSettings = SETTINGS) -> "WorkspaceLayout":
        build_dir = Path(settings.build_dir)
        return cls(
            build_dir=build_dir,
            package_dir=package_path_for(build_dir),
            output_dir=Path(settings.output_dir),
        )


def check_layout(layout: WorkspaceLayout, source_dir: Path) -> None:
    """Refuse layouts whose cleanup would remove the source images.

    Folders nested inside the source folder are fine, since discovery does
    not recurse. A folder equal to the source, or one that contains it, is not.
    """
    source = Path(source_dir).resolve()
    folders = {
        "build": layout.build_dir.resolve(),
        "package": layout.package_dir.resolve(),
        "output": layout.output_dir.resolve(),
    }
    for role, folder in folders.items():
        if folder == source or folder in source.parents:
            raise WorkspaceError(f"The {role} folder {folder} would delete the source folder {source}")
    if folders["build"] == folders["output"]:
        raise WorkspaceError(f"Build and output folders must differ, both are {folders['build']}")


def prepare_workspace(layout: WorkspaceLayout) -> None:
    """Remove artifacts of a previous run and create fresh build/output folders."""
    for stale in (layout.build_dir, layout.package_dir, layout.output_dir):
        shutil.rmtree(stale, ignore_errors=True)
    layout.build_dir.mkdir(parents=True)
    layout.output_dir.mkdir(parents=True)


def cleanup_workspace(layout: WorkspaceLayout) -> None:
    for temporary in (layout.build_dir, layout.package_dir):
        shutil.rmtree(temporary, ignore_errors=True)
