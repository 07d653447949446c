"""Discovery of example projects under the corpus category directories."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import DiscoveryError
from ..policy import CorpusPolicy


@dataclass(frozen=True)
class ExampleProject:
    path: Path
    category: str

    @property
    def name(self) -> str:
        return self.path.name


def _is_project(path: Path, policy: CorpusPolicy) -> bool:
    return (path / policy.manifest_file).is_file()


def _children(category_dir: Path, policy: CorpusPolicy) -> list[Path]:
    try:
        entries = sorted(category_dir.iterdir())
    except OSError as exc:
        raise DiscoveryError(f"category directory is unreadable: {category_dir}: {exc.strerror or exc}") from exc
    return [p for p in entries if p.is_dir() and not p.name.startswith(".") and _is_project(p, policy)]


def _representative(category_dir: Path, policy: CorpusPolicy) -> Path | None:
    """The category root when it is itself a project, else its first child project."""
    if _is_project(category_dir, policy) and any(
        (category_dir / name).is_file() for name in policy.toolchain_files
    ):
        return category_dir
    children = _children(category_dir, policy)
    return children[0] if children else None


def iter_projects(
    root: Path,
    policy: CorpusPolicy | None = None,
    canonical_only: bool = False,
    categories: Iterable[str] | None = None,
) -> Iterator[ExampleProject]:
    """Yield example projects in lexicographic category, then directory, order.

    With ``canonical_only`` at most one project is yielded per category.
    ``categories`` restricts the walk to a subset of the policy's categories.
    """
    policy = policy or CorpusPolicy()
    if not root.is_dir():
        raise DiscoveryError(f"corpus root does not exist or is not a directory: {root}")
    wanted = sorted(set(policy.categories) if categories is None else set(categories))
    unknown = [name for name in wanted if name not in policy.categories]
    if unknown:
        raise DiscoveryError(f"unknown categories requested: {', '.join(unknown)}")
    for category in wanted:
        category_dir = root / category
        if not category_dir.exists():
            continue
        if not category_dir.is_dir():
            raise DiscoveryError(f"category path is not a directory: {category_dir}")
        if canonical_only:
            chosen = _representative(category_dir, policy)
            if chosen is not None:
                yield ExampleProject(path=chosen, category=category)
            continue
        for child in _children(category_dir, policy):
            yield ExampleProject(path=child, category=category)
