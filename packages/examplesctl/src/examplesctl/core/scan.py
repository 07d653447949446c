from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import DiscoveryError


def _raise_unreadable(exc: OSError) -> None:
    raise DiscoveryError(f"corpus directory is unreadable: {exc.filename}: {exc.strerror or exc}") from exc


def walk_files(root: Path, excluded_dirs: Iterable[str] = ()) -> Iterator[Path]:
    """Yield every file under ``root`` in lexicographic, depth-first order.

    A missing root or an unreadable directory raises ``DiscoveryError``.
    """
    if not root.is_dir():
        raise DiscoveryError(f"corpus root does not exist or is not a directory: {root}")
    skip = set(excluded_dirs)
    for current, dirnames, filenames in os.walk(root, onerror=_raise_unreadable):
        dirnames[:] = sorted(name for name in dirnames if name not in skip)
        for name in sorted(filenames):
            yield Path(current) / name


def iter_files(root: Path, suffixes: Iterable[str], excluded_dirs: Iterable[str] = ()) -> list[Path]:
    wanted = set(suffixes)
    return [path for path in walk_files(root, excluded_dirs) if path.suffix in wanted]
