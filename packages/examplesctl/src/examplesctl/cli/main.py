from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..checks import list_checks, run_checks, select_checks
from ..core.context import RunContext
from ..core.logging import log_event
from ..core.serialize import dumps_json
from ..corpus import iter_projects, read_manifest
from ..errors import ScriptError
from ..exit_codes import ERR_INTERNAL, ERR_USAGE
from .output import build_base_payload, emit, render_check_report, render_error


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="examplesctl", description="verify example projects stay mutually consistent")
    p.add_argument("--version", action="version", version=f"examplesctl {__version__}")
    p.add_argument("--json", action="store_true", help="emit compact JSON output")
    p.add_argument("--log-json", action="store_true", help="emit structured log events as JSON lines")
    p.add_argument("--run-id", help="run identifier used in logs and reports")
    p.add_argument("--corpus-root", help="examples corpus root (default: ./examples)")
    p.add_argument("--policy", help="corpus policy file (.yaml, .json or .toml)")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug events")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    check_p = sub.add_parser("check", help="run corpus checks")
    check_p.add_argument("--only", action="append", metavar="ID", help="run only this check id (repeatable)")
    check_p.add_argument("--include-slow", action="store_true", help="also run slow checks such as example builds")
    check_p.add_argument("--jobs", type=int, default=1, help="parallel formatter invocations")
    check_p.add_argument("--out-file", help="also write the JSON report to this path")

    sub.add_parser("list", help="list registered checks")

    projects_p = sub.add_parser("projects", help="list discovered example projects")
    projects_p.add_argument("--canonical", action="store_true", help="only the canonical project per category")
    projects_p.add_argument("--category", action="append", help="restrict to a category (repeatable)")

    sub.add_parser("policy", help="print the effective corpus policy")
    sub.add_parser("version", help="print the tool version")
    return p


def _run_check_command(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    if ns.only:
        known = {chk.check_id for chk in list_checks()}
        unknown = sorted(set(ns.only) - known)
        if unknown:
            raise ScriptError(f"unknown check id: {', '.join(unknown)}", ERR_USAGE, kind="usage_error")
    code, payload = run_checks(ctx, select_checks(ns.only, ns.include_slow))
    if ns.out_file:
        out = Path(ns.out_file)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(dumps_json(payload, pretty=True) + "\n", encoding="utf-8")
    if as_json:
        emit(payload, True)
    else:
        print(render_check_report(payload))
    return code


def _projects_payload(ctx: RunContext, ns: argparse.Namespace) -> dict[str, object]:
    rows = []
    for project in iter_projects(ctx.corpus_root, ctx.policy, canonical_only=ns.canonical, categories=ns.category):
        manifest = read_manifest(project.path, ctx.policy)
        rows.append(
            {
                "category": project.category,
                "path": str(project.path),
                "name": manifest.name,
                "version": manifest.version,
                "edition": manifest.edition,
            }
        )
    return {**build_base_payload(ctx), "canonical_only": ns.canonical, "projects": rows}


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    ctx: RunContext | None = None
    as_json = bool(ns.json)
    try:
        ctx = RunContext.from_args(
            ns.run_id,
            ns.corpus_root,
            ns.policy,
            "json" if ns.json else "text",
            ns.verbose,
            ns.quiet,
            ns.log_json,
            getattr(ns, "jobs", 1),
        )
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, corpus_root=str(ctx.corpus_root))
        if ns.cmd == "version":
            emit({**build_base_payload(ctx), "examplesctl_version": __version__}, as_json)
            return 0
        if ns.cmd == "list":
            emit(
                {
                    **build_base_payload(ctx),
                    "checks": [
                        {"id": c.check_id, "domain": c.domain, "description": c.description, "slow": c.slow}
                        for c in list_checks()
                    ],
                },
                as_json,
            )
            return 0
        if ns.cmd == "policy":
            emit({**build_base_payload(ctx), "policy": ctx.policy.to_payload()}, as_json)
            return 0
        if ns.cmd == "projects":
            emit(_projects_payload(ctx, ns), as_json)
            return 0
        if ns.cmd == "check":
            return _run_check_command(ctx, ns, as_json)
        return ERR_USAGE
    except ScriptError as exc:
        if ctx is not None:
            log_event(ctx, "error", "cli", "failed", kind=exc.kind, code=exc.code)
        print(render_error(as_json=as_json, message=str(exc), code=exc.code, kind=exc.kind), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=as_json, message=f"internal error: {exc}", code=ERR_INTERNAL), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
