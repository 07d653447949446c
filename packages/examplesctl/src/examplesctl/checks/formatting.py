from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..core.context import RunContext
from ..core.logging import log_event
from ..core.process import CommandResult, run_command
from ..core.scan import iter_files
from ..errors import FormatCheckFailure, FormattingViolation, ScriptError
from ..exit_codes import ERR_PREREQ


def _check_file(ctx: RunContext, path: Path) -> CommandResult:
    cmd = [*ctx.policy.formatter, str(path)]
    try:
        return run_command(cmd, cwd=ctx.corpus_root, timeout_seconds=ctx.policy.formatter_timeout_seconds, ctx=ctx)
    except FileNotFoundError as exc:
        raise ScriptError(f"formatter not found: {cmd[0]}", ERR_PREREQ, kind="missing_tool") from exc


def check_formatting(ctx: RunContext) -> dict[str, object]:
    """Run the formatter in check mode on every source file; report all failures at once."""
    files = iter_files(ctx.corpus_root, ctx.policy.source_suffixes, ctx.policy.excluded_dirs)
    if ctx.jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=ctx.jobs) as pool:
            results = list(pool.map(lambda path: _check_file(ctx, path), files))
    else:
        results = [_check_file(ctx, path) for path in files]

    failures: list[FormatCheckFailure] = []
    for path, result in zip(files, results):
        if result.ok:
            continue
        failure = FormatCheckFailure(path=path, code=result.code, stdout=result.stdout, stderr=result.stderr)
        failures.append(failure)
        log_event(ctx, "error", "formatting", "check-failed", path=str(path), code=result.code)
        log_event(ctx, "info", "formatting", "output", path=str(path), stdout=result.stdout, stderr=result.stderr)
    if failures:
        raise FormattingViolation(failures)
    return {"checked_files": len(files)}
