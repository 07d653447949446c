from __future__ import annotations

from pathlib import PurePosixPath

from ..core.context import RunContext
from ..core.paths import relative_parts
from ..core.scan import walk_files
from ..errors import PolicyViolation
from ..policy import CorpusPolicy, RuleClass


def classify(rel_parts: tuple[str, ...], policy: CorpusPolicy) -> list[str]:
    """Return a message for every forbidden-file rule the relative path breaks."""
    messages: list[str] = []
    rel = PurePosixPath(*rel_parts).as_posix()
    for rule in policy.forbidden_files:
        if not rule.matches(rel_parts) or rule.permits(rel_parts):
            continue
        if rule.rule_class is RuleClass.GENERAL:
            messages.append(f"{rel}: `{rule.pattern}` is never allowed in the corpus")
        else:
            messages.append(f"{rel}: `{rule.pattern}` is only allowed at a category root or under an exempt directory")
    return messages


def check_forbidden_paths(ctx: RunContext) -> dict[str, object]:
    root = ctx.corpus_root
    violations: list[str] = []
    scanned = 0
    for path in walk_files(root, ctx.policy.excluded_dirs):
        scanned += 1
        violations.extend(classify(relative_parts(path, root), ctx.policy))
    if violations:
        raise PolicyViolation(violations)
    return {"scanned_files": scanned}
