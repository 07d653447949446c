from __future__ import annotations

import json
from dataclasses import replace
from importlib import resources
from pathlib import Path
from typing import Any

from ..core.toml import load_toml
from ..errors import ParseError, ScriptError
from ..exit_codes import ERR_CONFIG
from .model import CorpusPolicy, ExemptionSets, ForbiddenFileRule, RuleClass

POLICY_ENV = "EXAMPLESCTL_POLICY"
DEFAULT_POLICY_FILENAME = "examplesctl.yaml"
SCHEMA_NAME = "corpus-policy.schema.json"

_TUPLE_KEYS = ("categories", "toolchain_files", "formatter", "source_suffixes", "excluded_dirs", "build_command")
_SCALAR_KEYS = (
    "manifest_file",
    "build_config_file",
    "target_dir_field",
    "sanctioned_edition",
    "forbidden_component",
    "expected_version",
    "formatter_timeout_seconds",
    "build_timeout_seconds",
)


def _schema() -> dict[str, Any]:
    text = resources.files("examplesctl").joinpath("schemas", SCHEMA_NAME).read_text(encoding="utf-8")
    return json.loads(text)


def _read_payload(path: Path) -> Any:
    if path.suffix in {".yaml", ".yml"}:
        import yaml

        try:
            with path.open("r", encoding="utf-8") as handle:
                return yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ScriptError(f"{path}: invalid YAML: {exc}", ERR_CONFIG, kind="config_error") from exc
    if path.suffix == ".toml":
        try:
            return load_toml(path)
        except ParseError as exc:
            raise ScriptError(str(exc), ERR_CONFIG, kind="config_error") from exc
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ScriptError(f"{path}: invalid JSON: {exc}", ERR_CONFIG, kind="config_error") from exc


def validate_policy_payload(payload: Any, source: str = "<policy>") -> None:
    import jsonschema

    try:
        jsonschema.validate(payload, _schema())
    except jsonschema.ValidationError as exc:
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        raise ScriptError(f"{source}: policy validation failed at {loc}: {exc.message}", ERR_CONFIG, kind="config_error") from exc


def policy_from_payload(payload: dict[str, Any], base: CorpusPolicy | None = None) -> CorpusPolicy:
    policy = base or CorpusPolicy()
    updates: dict[str, Any] = {}
    for key in _TUPLE_KEYS:
        if key in payload:
            updates[key] = tuple(payload[key])
    for key in _SCALAR_KEYS:
        if key in payload:
            updates[key] = payload[key]
    if "exemptions" in payload:
        updates["exemptions"] = replace(
            policy.exemptions,
            **{name: frozenset(values) for name, values in payload["exemptions"].items()},
        )
    if "forbidden_files" in payload:
        updates["forbidden_files"] = tuple(
            ForbiddenFileRule(
                pattern=row["pattern"],
                rule_class=RuleClass(row["class"]),
                exempt_dirs=frozenset(row.get("exempt_dirs", ())),
                category_roots=frozenset(row.get("category_roots", ())),
            )
            for row in payload["forbidden_files"]
        )
    return replace(policy, **updates)


def load_policy(path: Path) -> CorpusPolicy:
    if not path.is_file():
        raise ScriptError(f"policy file not found: {path}", ERR_CONFIG, kind="config_error")
    payload = _read_payload(path)
    validate_policy_payload(payload, str(path))
    return policy_from_payload(payload)


def resolve_policy(corpus_root: Path, explicit: str | None, env: dict[str, str]) -> tuple[CorpusPolicy, Path | None]:
    """Pick the policy file: explicit flag, then env var, then the corpus default."""
    if explicit:
        path = Path(explicit)
        return load_policy(path), path
    if env.get(POLICY_ENV):
        path = Path(env[POLICY_ENV])
        return load_policy(path), path
    candidate = corpus_root / DEFAULT_POLICY_FILENAME
    if candidate.is_file():
        return load_policy(candidate), candidate
    return CorpusPolicy(), None
