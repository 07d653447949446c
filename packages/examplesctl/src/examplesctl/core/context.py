from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Mapping

from ..policy import CorpusPolicy, resolve_policy

OutputFormat = Literal["text", "json"]

CORPUS_ROOT_ENV = "EXAMPLESCTL_CORPUS_ROOT"
DEFAULT_CORPUS_DIR = "examples"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    corpus_root: Path
    policy: CorpusPolicy = field(default_factory=CorpusPolicy)
    policy_path: Path | None = None
    output_format: OutputFormat = "text"
    verbose: bool = False
    quiet: bool = False
    log_json: bool = False
    jobs: int = 1

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        corpus_root: str | None,
        policy: str | None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
        jobs: int = 1,
        env: Mapping[str, str] | None = None,
    ) -> "RunContext":
        environ = dict(os.environ if env is None else env)
        default_run = f"examples-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        resolved_run_id = run_id or environ.get("RUN_ID", default_run)
        root = Path(corpus_root or environ.get(CORPUS_ROOT_ENV, DEFAULT_CORPUS_DIR))
        resolved_root = root if root.is_absolute() else Path.cwd() / root
        resolved_policy, policy_path = resolve_policy(resolved_root, policy, environ)
        return cls(
            run_id=resolved_run_id,
            corpus_root=resolved_root,
            policy=resolved_policy,
            policy_path=policy_path,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            jobs=max(1, jobs),
        )

    @classmethod
    def for_corpus(cls, corpus_root: Path, policy: CorpusPolicy | None = None, **kwargs: object) -> "RunContext":
        return cls(run_id="run-deterministic", corpus_root=corpus_root, policy=policy or CorpusPolicy(), **kwargs)  # type: ignore[arg-type]
