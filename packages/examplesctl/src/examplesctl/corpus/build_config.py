from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.paths import absolutize
from ..core.serialize import dumps_json
from ..core.toml import load_toml
from ..errors import NormalizationError
from ..policy import CorpusPolicy


@dataclass(frozen=True)
class NormalizedBuildConfig:
    path: Path
    target_dir: Path
    text: str


def normalize_document(document: dict[str, Any], project: Path, field: str, source: Path) -> tuple[dict[str, Any], Path]:
    """Return a copy of ``document`` with ``field`` rewritten to an absolute path.

    The rewrite is lexical: ``.`` and ``..`` are folded against ``project``
    and the target directory need not exist.
    """
    mutated = copy.deepcopy(document)
    *parents, leaf = field.split(".")
    node: Any = mutated
    for part in parents:
        node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            raise NormalizationError(source, field, f"missing table `{part}`")
    if leaf not in node:
        raise NormalizationError(source, field, "field is missing")
    raw = node[leaf]
    if not isinstance(raw, str):
        raise NormalizationError(source, field, f"expected a string, found {type(raw).__name__}")
    target = absolutize(project, raw)
    node[leaf] = target.as_posix()
    return mutated, target


def normalize_build_config(project: Path, policy: CorpusPolicy | None = None) -> NormalizedBuildConfig:
    policy = policy or CorpusPolicy()
    path = project / policy.build_config_file
    document = load_toml(path)
    mutated, target = normalize_document(document, project, policy.target_dir_field, path)
    return NormalizedBuildConfig(path=path, target_dir=target, text=dumps_json(mutated, pretty=True))
