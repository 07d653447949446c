"""Lexical path helpers.

Nothing here touches the filesystem: paths are resolved against a known base
without following symlinks or requiring the target to exist.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath


def normalize_path(path: PurePath) -> Path:
    return Path(os.path.normpath(os.fspath(path)))


def absolutize(base: Path, raw: str) -> Path:
    return normalize_path(base / raw)


def relative_parts(path: Path, root: Path) -> tuple[str, ...]:
    return PurePath(os.path.relpath(path, root)).parts
