"""Cross-project invariants anchored on a single baseline per invariant.

Every check walks the projects once. The first non-exempt value (or a pinned
value from the policy) becomes the baseline and each later value must equal
it; the first divergence is reported.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from ..core.context import RunContext
from ..core.logging import log_event
from ..corpus import ExampleProject, iter_projects, normalize_build_config, read_manifest, read_toolchain
from ..errors import ConsistencyError, PolicyViolation

T = TypeVar("T")

_UNSET: Any = object()


@dataclass(frozen=True)
class Baseline(Generic[T]):
    invariant: str
    value: T | None
    checked: int

    def summary(self) -> dict[str, object]:
        return {"invariant": self.invariant, "baseline": self.value, "checked": self.checked}


def fold_baseline(
    invariant: str,
    observations: Iterable[tuple[Path, T]],
    pinned: T = _UNSET,
    describe: Callable[[T, T], str] | None = None,
) -> Baseline[T]:
    anchor = pinned
    checked = 0
    for path, value in observations:
        checked += 1
        if anchor is _UNSET:
            anchor = value
            continue
        if value != anchor:
            detail = describe(anchor, value) if describe else ""
            raise ConsistencyError(invariant, anchor, path, value, detail)
    return Baseline(invariant, None if anchor is _UNSET else anchor, checked)


def _projects(ctx: RunContext, invariant: str, canonical_only: bool) -> Iterator[ExampleProject]:
    for project in iter_projects(ctx.corpus_root, ctx.policy, canonical_only=canonical_only):
        if ctx.policy.is_exempt(invariant, project.name, project.category):
            log_event(ctx, "debug", "consistency", "exempt", invariant=invariant, project=str(project.path))
            continue
        yield project


def _versions(ctx: RunContext) -> Iterator[tuple[Path, str | None]]:
    for project in _projects(ctx, "version", canonical_only=False):
        manifest = read_manifest(project.path, ctx.policy)
        if manifest.is_package:
            yield project.path, manifest.version


def _editions(ctx: RunContext) -> Iterator[tuple[Path, str | None]]:
    for project in _projects(ctx, "edition", canonical_only=False):
        manifest = read_manifest(project.path, ctx.policy)
        if manifest.is_package:
            yield project.path, manifest.edition


def _channels(ctx: RunContext) -> Iterator[tuple[Path, str | None]]:
    for project in _projects(ctx, "channel", canonical_only=True):
        yield project.path, read_toolchain(project.path, ctx.policy).channel


def _build_configs(ctx: RunContext) -> Iterator[tuple[Path, str]]:
    for project in _projects(ctx, "build-config", canonical_only=True):
        yield project.path, normalize_build_config(project.path, ctx.policy).text


def _text_diff(expected: str, actual: str) -> str:
    lines = difflib.unified_diff(
        expected.splitlines(),
        actual.splitlines(),
        fromfile="baseline",
        tofile="divergent",
        lineterm="",
    )
    return "\n".join(lines)


def check_versions(ctx: RunContext) -> dict[str, object]:
    pinned = ctx.policy.expected_version if ctx.policy.expected_version is not None else _UNSET
    return fold_baseline("package.version", _versions(ctx), pinned).summary()


def check_editions(ctx: RunContext) -> dict[str, object]:
    return fold_baseline("package.edition", _editions(ctx), ctx.policy.sanctioned_edition).summary()


def check_channels(ctx: RunContext) -> dict[str, object]:
    return fold_baseline("toolchain.channel", _channels(ctx)).summary()


def check_build_configs(ctx: RunContext) -> dict[str, object]:
    result = fold_baseline("build-config", _build_configs(ctx), describe=_text_diff)
    return {"invariant": result.invariant, "checked": result.checked}


def check_components(ctx: RunContext) -> dict[str, object]:
    forbidden = ctx.policy.forbidden_component
    violations: list[str] = []
    checked = 0
    for project in _projects(ctx, "components", canonical_only=True):
        checked += 1
        pin = read_toolchain(project.path, ctx.policy)
        if forbidden in pin.components:
            violations.append(f"{pin.path}: requests `{forbidden}` (components: {', '.join(sorted(pin.components))})")
    if violations:
        raise PolicyViolation(violations, summary="forbidden toolchain component requested")
    return {"forbidden_component": forbidden, "checked": checked}
