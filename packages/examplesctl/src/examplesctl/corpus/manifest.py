from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..core.toml import load_toml
from ..errors import ParseError
from ..policy import CorpusPolicy

_SEMVER = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


# Stands in for a field inherited with `field.workspace = true`.
WORKSPACE_INHERITED = "workspace"


@dataclass(frozen=True)
class Manifest:
    path: Path
    is_package: bool
    name: str | None = None
    version: str | None = None
    edition: str | None = None


def _optional_str(path: Path, table: dict[str, object], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if value == {"workspace": True}:
        return WORKSPACE_INHERITED
    if not isinstance(value, str):
        raise ParseError(path, f"package.{key}", f"expected a string, found {type(value).__name__}")
    return value


def read_manifest(project: Path, policy: CorpusPolicy | None = None) -> Manifest:
    """Read the package facts from a project's manifest.

    A manifest without a ``[package]`` table (a virtual workspace) is not an
    error; all of its facts are ``None``. A field inherited from the workspace
    reads as ``WORKSPACE_INHERITED``.
    """
    policy = policy or CorpusPolicy()
    path = project / policy.manifest_file
    document = load_toml(path)
    package = document.get("package")
    if package is None:
        return Manifest(path=path, is_package=False)
    if not isinstance(package, dict):
        raise ParseError(path, "package", "expected a table")
    version = _optional_str(path, package, "version")
    if version is not None and version != WORKSPACE_INHERITED and not _SEMVER.match(version):
        raise ParseError(path, "package.version", f"not a semantic version: {version!r}")
    return Manifest(
        path=path,
        is_package=True,
        name=_optional_str(path, package, "name"),
        version=version,
        edition=_optional_str(path, package, "edition"),
    )
