from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..core.toml import load_toml
from ..errors import ParseError
from ..policy import CorpusPolicy


@dataclass(frozen=True)
class ToolchainPin:
    path: Path
    channel: str | None
    components: frozenset[str] = field(default_factory=frozenset)


def locate_toolchain(project: Path, policy: CorpusPolicy) -> Path:
    for name in policy.toolchain_files:
        candidate = project / name
        if candidate.is_file():
            return candidate
    return project / policy.toolchain_files[0]


def read_toolchain(project: Path, policy: CorpusPolicy | None = None) -> ToolchainPin:
    policy = policy or CorpusPolicy()
    path = locate_toolchain(project, policy)
    document = load_toml(path)
    table = document.get("toolchain", {})
    if not isinstance(table, dict):
        raise ParseError(path, "toolchain", "expected a table")
    channel = table.get("channel")
    if channel is not None and not isinstance(channel, str):
        raise ParseError(path, "toolchain.channel", f"expected a string, found {type(channel).__name__}")
    raw_components = table.get("components", [])
    if not isinstance(raw_components, list) or not all(isinstance(item, str) for item in raw_components):
        raise ParseError(path, "toolchain.components", "expected a list of strings")
    return ToolchainPin(path=path, channel=channel, components=frozenset(raw_components))
