from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from ..config import ASSET_EXTENSION
from ..errors import CompilerError

logger = logging.getLogger("pdi_builder.extract")


def find_assets(package_dir: Path, extension: str = ASSET_EXTENSION) -> List[Path]:
    suffix = extension.lower()
    return sorted(
        path for path in Path(package_dir).rglob("*") if path.is_file() and path.name.lower().endswith(suffix)
    )


def extract_assets(package_dir: Path, output_dir: Path, extension: str = ASSET_EXTENSION) -> int:
    """Move every ``extension`` file under ``package_dir`` into flat ``output_dir``.

    Matching is by filename only; contents are not inspected. When two assets
    share a name the later one in path order replaces the earlier one and a
    warning is logged.
    """
    package_dir = Path(package_dir)
    output_dir = Path(output_dir)
    if not package_dir.is_dir():
        raise CompilerError(f"Package directory {package_dir} does not exist")

    output_dir.mkdir(parents=True, exist_ok=True)
    moved: set[str] = set()
    for asset in find_assets(package_dir, extension):
        destination = output_dir / asset.name
        if asset.name in moved:
            logger.warning("Asset name collision for %s; keeping %s", asset.name, asset)
        if destination.exists():
            destination.unlink()
        shutil.move(str(asset), str(destination))
        moved.add(asset.name)
    return len(moved)
