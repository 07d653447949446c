from __future__ import annotations

import time
from typing import Iterable

from ..core.context import RunContext
from ..core.logging import log_event
from ..errors import DiscoveryError, ScriptError
from ..exit_codes import ERR_CHECKS_FAILED, OK
from .base import CheckDef


def run_check(ctx: RunContext, chk: CheckDef) -> dict[str, object]:
    start = time.perf_counter()
    errors: list[str] = []
    details: dict[str, object] = {}
    error_kind = ""
    try:
        details = dict(chk.fn(ctx))
    except DiscoveryError:
        raise
    except ScriptError as exc:
        errors = [str(exc)]
        error_kind = exc.kind
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    status = "pass" if not errors else "fail"
    log_event(ctx, "info" if status == "pass" else "error", "checks", "result", id=chk.check_id, status=status, duration_ms=elapsed_ms)
    return {
        "id": chk.check_id,
        "domain": chk.domain,
        "description": chk.description,
        "status": status,
        "duration_ms": elapsed_ms,
        "budget_ms": chk.budget_ms,
        "budget_status": "pass" if elapsed_ms <= chk.budget_ms else "warn",
        "error_kind": error_kind,
        "errors": errors,
        "details": details,
    }


def run_checks(ctx: RunContext, selected: Iterable[CheckDef]) -> tuple[int, dict[str, object]]:
    """Run every selected check; one failure never stops the others.

    A ``DiscoveryError`` means the corpus itself is unusable and aborts the run.
    """
    rows = [run_check(ctx, chk) for chk in selected]
    failed = sum(1 for row in rows if row["status"] == "fail")
    payload = {
        "schema_version": 1,
        "tool": "examplesctl",
        "kind": "checks-runner",
        "run_id": ctx.run_id,
        "corpus_root": str(ctx.corpus_root),
        "status": "pass" if failed == 0 else "fail",
        "failed_count": failed,
        "total_count": len(rows),
        "checks": rows,
    }
    return (OK if failed == 0 else ERR_CHECKS_FAILED), payload
