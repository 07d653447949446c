from __future__ import annotations

from .base import CheckDef
from .build import check_example_builds
from .consistency import check_build_configs, check_channels, check_components, check_editions, check_versions
from .forbidden_paths import check_forbidden_paths
from .formatting import check_formatting

CHECKS: tuple[CheckDef, ...] = (
    CheckDef("examples/version", "examples", "examples declare the same package version", 2000, check_versions),
    CheckDef("examples/edition", "examples", "examples use the sanctioned language edition", 2000, check_editions),
    CheckDef("examples/channel", "examples", "example toolchain pins use one channel", 1000, check_channels),
    CheckDef("examples/components", "examples", "toolchain pins do not request the forbidden component", 1000, check_components),
    CheckDef("examples/build-config", "examples", "build configs match once target-dir is absolutized", 1000, check_build_configs),
    CheckDef("corpus/forbidden-paths", "corpus", "forbidden files only where the policy permits them", 1500, check_forbidden_paths),
    CheckDef("corpus/formatting", "corpus", "every source file passes the formatter check", 60_000, check_formatting),
    CheckDef("examples/build", "examples", "every example builds and passes its own tests", 1_800_000, check_example_builds, slow=True),
)


def list_checks() -> tuple[CheckDef, ...]:
    return CHECKS


def get_check(check_id: str) -> CheckDef | None:
    return next((check for check in CHECKS if check.check_id == check_id), None)


def select_checks(only: list[str] | None = None, include_slow: bool = False) -> list[CheckDef]:
    if only:
        return [check for check in CHECKS if check.check_id in set(only)]
    return [check for check in CHECKS if include_slow or not check.slow]
