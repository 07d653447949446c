from __future__ import annotations

import os
from pathlib import Path

import pytest

from examplesctl.corpus import ExampleProject, iter_projects
from examplesctl.errors import DiscoveryError
from examplesctl.policy import CorpusPolicy
from helpers import write, write_manifest


def _rel(projects: list[ExampleProject], root: Path) -> list[str]:
    return [p.path.relative_to(root).as_posix() for p in projects]


def test_iter_projects_yields_children_in_lexicographic_order(corpus: Path) -> None:
    projects = list(iter_projects(corpus))
    assert _rel(projects, corpus) == [
        "experimental/delta",
        "general/alpha",
        "restriction/gamma",
        "supplementary/beta",
        "testing/epsilon",
        "testing/straggler",
    ]
    assert [p.category for p in projects] == ["experimental", "general", "restriction", "supplementary", "testing", "testing"]


def test_iter_projects_canonical_yields_one_per_category(corpus: Path) -> None:
    projects = list(iter_projects(corpus, canonical_only=True))
    assert _rel(projects, corpus) == ["experimental/delta", "general", "restriction", "supplementary", "testing/epsilon"]
    assert len({p.category for p in projects}) == len(projects)


def test_iter_projects_skips_hidden_and_non_project_dirs(corpus: Path) -> None:
    write(corpus / "general" / "notes" / "README.md", "not an example\n")
    write_manifest(corpus / "general" / ".hidden")
    assert "general/notes" not in _rel(list(iter_projects(corpus)), corpus)
    assert "general/.hidden" not in _rel(list(iter_projects(corpus)), corpus)


def test_iter_projects_category_subset(corpus: Path) -> None:
    projects = list(iter_projects(corpus, categories=["testing", "general"]))
    assert _rel(projects, corpus) == ["general/alpha", "testing/epsilon", "testing/straggler"]


def test_iter_projects_unknown_category_is_discovery_error(corpus: Path) -> None:
    with pytest.raises(DiscoveryError, match="unknown categories"):
        list(iter_projects(corpus, categories=["nope"]))


def test_iter_projects_missing_categories_are_skipped(tmp_path: Path) -> None:
    write_manifest(tmp_path / "general" / "only")
    assert [p.name for p in iter_projects(tmp_path)] == ["only"]


def test_iter_projects_missing_root_is_discovery_error(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError, match="does not exist"):
        list(iter_projects(tmp_path / "absent"))


def test_iter_projects_category_file_is_discovery_error(tmp_path: Path) -> None:
    write(tmp_path / "general", "a file, not a directory\n")
    with pytest.raises(DiscoveryError, match="not a directory"):
        list(iter_projects(tmp_path))


@pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs posix permissions without root")
def test_iter_projects_unreadable_category_is_discovery_error(corpus: Path) -> None:
    category = corpus / "general"
    category.chmod(0)
    try:
        with pytest.raises(DiscoveryError, match="unreadable"):
            list(iter_projects(corpus))
    finally:
        category.chmod(0o755)


def test_iter_projects_respects_policy_categories(corpus: Path) -> None:
    policy = CorpusPolicy(categories=("general",))
    assert [p.category for p in iter_projects(corpus, policy)] == ["general"]


def test_iter_projects_is_lazy(tmp_path: Path) -> None:
    gen = iter_projects(tmp_path / "absent")
    with pytest.raises(DiscoveryError):
        next(gen)
