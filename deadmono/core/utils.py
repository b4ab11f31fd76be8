"""Utility functions for normalizing analyzer output."""

from __future__ import annotations

import os


def absolute_file_path(file: str, base_dir: str) -> str:
    """
    Make a file path reported by the analyzer absolute.

    Relative paths are resolved against ``base_dir``, the directory the
    analyzer ran in. The result is cleaned, so ``..`` segments are removed.
    """
    if os.path.isabs(file):
        return file
    return os.path.normpath(os.path.join(base_dir, file))


def strip_module_root(file: str, module_root: str) -> str:
    """Make ``file`` relative to ``module_root`` when it lives under it."""
    prefix = os.path.join(os.path.normpath(module_root), "")
    return file.removeprefix(prefix)


def normalize_file_path(file: str, base_dir: str, module_root: str | None) -> str:
    """
    Normalize a reported file path so it is comparable across entrypoints.

    Args:
        file: Path as reported by the analyzer
        base_dir: Directory the analyzer ran in
        module_root: Root of the common module, or None when entrypoints span
            several modules and paths must stay absolute

    Returns:
        Path relative to the common module root, or an absolute path
    """
    path = absolute_file_path(file, base_dir)
    if module_root is not None:
        path = strip_module_root(path, module_root)
    return path
