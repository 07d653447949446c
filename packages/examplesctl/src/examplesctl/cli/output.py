"""CLI payload output helpers."""

from __future__ import annotations

from ..core.context import RunContext
from ..core.serialize import dumps_json


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def build_base_payload(ctx: RunContext, status: str = "ok") -> dict[str, object]:
    return {
        "schema_version": 1,
        "tool": "examplesctl",
        "status": status,
        "run_id": ctx.run_id,
        "corpus_root": str(ctx.corpus_root),
        "policy_path": str(ctx.policy_path) if ctx.policy_path else None,
    }


def render_error(*, as_json: bool, message: str, code: int, kind: str = "generic_error") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": "examplesctl.error.v1",
                "schema_version": 1,
                "tool": "examplesctl",
                "status": "error",
                "errors": [{"code": code, "kind": kind, "message": message}],
            },
            pretty=False,
        )
    return message


def render_check_report(payload: dict[str, object]) -> str:
    lines: list[str] = []
    for row in payload.get("checks", []):  # type: ignore[union-attr]
        lines.append(f"{row['status'].upper():4} {row['id']} ({row['duration_ms']}ms)")
        for error in row["errors"]:
            lines.extend(f"    {line}" for line in str(error).splitlines())
    lines.append(f"{payload['status']}: {payload['failed_count']} of {payload['total_count']} checks failed")
    return "\n".join(lines)
