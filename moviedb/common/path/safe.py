# moviedb/common/path/safe.py
from __future__ import annotations

from pathlib import Path


def contained_path(root: Path, name: str) -> Path:
    """
    Resolve `name` below an already resolved `root`.
    Raises ValueError when the result would land outside of it ("../x", "/etc/x").
    """
    path = (root / name).resolve()
    if path == root or not path.is_relative_to(root):
        raise ValueError(f"{name!r} does not stay inside {root}")
    return path
