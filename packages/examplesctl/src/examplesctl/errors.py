from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .exit_codes import (
    ERR_BUILD,
    ERR_CONSISTENCY,
    ERR_DISCOVERY,
    ERR_FORMAT,
    ERR_INTERNAL,
    ERR_NORMALIZATION,
    ERR_PARSE,
    ERR_POLICY,
)


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


class DiscoveryError(ScriptError):
    def __init__(self, message: str) -> None:
        super().__init__(message, ERR_DISCOVERY, "discovery_error")


class ParseError(ScriptError):
    def __init__(self, path: Path, field: str, detail: str) -> None:
        super().__init__(f"{path}: malformed `{field}`: {detail}", ERR_PARSE, "parse_error")
        self.path = path
        self.field = field


class NormalizationError(ScriptError):
    def __init__(self, path: Path, field: str, detail: str) -> None:
        super().__init__(f"{path}: cannot normalize `{field}`: {detail}", ERR_NORMALIZATION, "normalization_error")
        self.path = path
        self.field = field


class ConsistencyError(ScriptError):
    def __init__(self, invariant: str, baseline: object, path: Path, value: object, detail: str = "") -> None:
        summary = f"{invariant} diverges for `{path}`"
        super().__init__(
            f"{summary}:\n{detail}" if detail else f"{summary}: expected {baseline!r}, found {value!r}",
            ERR_CONSISTENCY,
            "consistency_error",
        )
        self.invariant = invariant
        self.baseline = baseline
        self.path = path
        self.value = value


class PolicyViolation(ScriptError):
    def __init__(self, violations: list[str], summary: str = "forbidden files found in the corpus") -> None:
        lines = "\n".join(violations)
        super().__init__(f"{summary}:\n{lines}", ERR_POLICY, "policy_violation")
        self.violations = violations


@dataclass(frozen=True)
class FormatCheckFailure:
    path: Path
    code: int
    stdout: str
    stderr: str

    def render(self) -> str:
        return f"format check failed for: {self.path}\nstdout:\n```\n{self.stdout}\n```\nstderr:\n```\n{self.stderr}\n```"


class FormattingViolation(ScriptError):
    def __init__(self, failures: list[FormatCheckFailure]) -> None:
        listing = "\n".join(str(item.path) for item in failures)
        output = "\n".join(item.render() for item in failures)
        super().__init__(
            f"format check failed for the following files:\n{listing}\n\n{output}", ERR_FORMAT, "formatting_violation"
        )
        self.failures = failures


class BuildFailure(ScriptError):
    def __init__(self, projects: list[Path]) -> None:
        listing = "\n".join(str(path) for path in projects)
        super().__init__(f"example build failed for the following projects:\n{listing}", ERR_BUILD, "build_failure")
        self.projects = projects
