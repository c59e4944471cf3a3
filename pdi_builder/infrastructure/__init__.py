"""Helpers around the external compiler and the on-disk workspace."""

from .extract import extract_assets, find_assets
from .toolchain import PdcCompiler, package_path_for, require_tool, write_placeholder_program
from .workspace import WorkspaceLayout, check_layout, cleanup_workspace, prepare_workspace

__all__ = [
    "extract_assets",
    "find_assets",
    "PdcCompiler",
    "package_path_for",
    "require_tool",
    "write_placeholder_program",
    "WorkspaceLayout",
    "check_layout",
    "cleanup_workspace",
    "prepare_workspace",
]
