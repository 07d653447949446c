from __future__ import annotations

import os

from ..core.context import RunContext
from ..core.logging import log_event
from ..core.process import run_command
from ..corpus import iter_projects
from ..errors import BuildFailure, ScriptError
from ..exit_codes import ERR_PREREQ

# Variables an outer build leaks into child builds and which would redirect or
# re-pin the example's own toolchain.
SANITIZED_ENV_VARS = (
    "CARGO",
    "CARGO_BUILD_TARGET_DIR",
    "CARGO_TARGET_DIR",
    "RUSTC",
    "RUSTC_WRAPPER",
    "RUSTDOCFLAGS",
    "RUSTFLAGS",
    "RUSTUP_TOOLCHAIN",
)


def sanitized_environment(env: dict[str, str] | None = None) -> dict[str, str]:
    source = dict(os.environ if env is None else env)
    return {key: value for key, value in source.items() if key not in SANITIZED_ENV_VARS}


def check_example_builds(ctx: RunContext) -> dict[str, object]:
    """Build and test every example; the outcome per project is pass/fail only."""
    env = sanitized_environment()
    cmd = list(ctx.policy.build_command)
    failed = []
    built = 0
    for project in iter_projects(ctx.corpus_root, ctx.policy):
        built += 1
        log_event(ctx, "info", "build", "start", project=str(project.path))
        try:
            result = run_command(cmd, cwd=project.path, timeout_seconds=ctx.policy.build_timeout_seconds, env=env, ctx=ctx)
        except FileNotFoundError as exc:
            raise ScriptError(f"build tool not found: {cmd[0]}", ERR_PREREQ, kind="missing_tool") from exc
        if not result.ok:
            failed.append(project.path)
            log_event(ctx, "error", "build", "failed", project=str(project.path), code=result.code, output=result.combined_output[-4000:])
    if failed:
        raise BuildFailure(failed)
    return {"built_projects": built}
