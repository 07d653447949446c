"""Corpus policy: the declarative rules every check reads.

Defaults mirror the rules the example corpus has always been held to. Each
invariant class carries its own exemption set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath


class RuleClass(str, Enum):
    GENERAL = "general"
    SPECIFIC = "specific"


@dataclass(frozen=True)
class ForbiddenFileRule:
    pattern: str
    rule_class: RuleClass
    exempt_dirs: frozenset[str] = frozenset()
    category_roots: frozenset[str] = frozenset()

    @property
    def parts(self) -> tuple[str, ...]:
        return PurePosixPath(self.pattern).parts

    def matches(self, rel_parts: tuple[str, ...]) -> bool:
        width = len(self.parts)
        return len(rel_parts) >= width and rel_parts[-width:] == self.parts

    def location(self, rel_parts: tuple[str, ...]) -> tuple[str, ...]:
        return rel_parts[: len(rel_parts) - len(self.parts)]

    def permits(self, rel_parts: tuple[str, ...]) -> bool:
        if self.rule_class is RuleClass.GENERAL:
            return False
        where = self.location(rel_parts)
        in_exempt_dir = bool(where) and where[0] in self.exempt_dirs
        at_category_root = len(where) == 1 and where[0] in self.category_roots
        return in_exempt_dir or at_category_root


@dataclass(frozen=True)
class ExemptionSets:
    version: frozenset[str] = frozenset({"restriction"})
    edition: frozenset[str] = frozenset()
    channel: frozenset[str] = frozenset({"straggler"})
    build_config: frozenset[str] = frozenset({"straggler"})
    components: frozenset[str] = frozenset()

    def for_invariant(self, invariant: str) -> frozenset[str]:
        return getattr(self, invariant.replace("-", "_"))


def _default_rules() -> tuple[ForbiddenFileRule, ...]:
    exempt_dirs = frozenset({"experimental", "testing"})
    category_roots = frozenset({"general", "supplementary", "restriction"})
    return (
        ForbiddenFileRule(".gitignore", RuleClass.GENERAL),
        ForbiddenFileRule(".cargo/config.toml", RuleClass.SPECIFIC, exempt_dirs, category_roots),
        ForbiddenFileRule("rust-toolchain", RuleClass.SPECIFIC, exempt_dirs, category_roots),
    )


@dataclass(frozen=True)
class CorpusPolicy:
    categories: tuple[str, ...] = ("experimental", "general", "restriction", "supplementary", "testing")
    manifest_file: str = "Cargo.toml"
    toolchain_files: tuple[str, ...] = ("rust-toolchain", "rust-toolchain.toml")
    build_config_file: str = ".cargo/config.toml"
    target_dir_field: str = "build.target-dir"
    sanctioned_edition: str = "2024"
    forbidden_component: str = "rust-src"
    expected_version: str | None = None
    exemptions: ExemptionSets = field(default_factory=ExemptionSets)
    forbidden_files: tuple[ForbiddenFileRule, ...] = field(default_factory=_default_rules)
    formatter: tuple[str, ...] = ("rustfmt", "+nightly", "--check", "--edition=2024")
    formatter_timeout_seconds: float = 60.0
    source_suffixes: tuple[str, ...] = (".rs",)
    excluded_dirs: tuple[str, ...] = (".git", "target")
    build_command: tuple[str, ...] = ("cargo", "test", "--lib", "--tests")
    build_timeout_seconds: float = 1800.0

    def is_exempt(self, invariant: str, name: str, category: str) -> bool:
        names = self.exemptions.for_invariant(invariant)
        return name in names or category in names

    def to_payload(self) -> dict[str, object]:
        return {
            "categories": list(self.categories),
            "manifest_file": self.manifest_file,
            "toolchain_files": list(self.toolchain_files),
            "build_config_file": self.build_config_file,
            "target_dir_field": self.target_dir_field,
            "sanctioned_edition": self.sanctioned_edition,
            "forbidden_component": self.forbidden_component,
            "expected_version": self.expected_version,
            "exemptions": {
                "version": sorted(self.exemptions.version),
                "edition": sorted(self.exemptions.edition),
                "channel": sorted(self.exemptions.channel),
                "build_config": sorted(self.exemptions.build_config),
                "components": sorted(self.exemptions.components),
            },
            "forbidden_files": [
                {
                    "pattern": rule.pattern,
                    "class": rule.rule_class.value,
                    "exempt_dirs": sorted(rule.exempt_dirs),
                    "category_roots": sorted(rule.category_roots),
                }
                for rule in self.forbidden_files
            ],
            "formatter": list(self.formatter),
            "formatter_timeout_seconds": self.formatter_timeout_seconds,
            "source_suffixes": list(self.source_suffixes),
            "excluded_dirs": list(self.excluded_dirs),
            "build_command": list(self.build_command),
            "build_timeout_seconds": self.build_timeout_seconds,
        }
