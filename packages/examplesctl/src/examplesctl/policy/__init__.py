from .loader import DEFAULT_POLICY_FILENAME, POLICY_ENV, load_policy, resolve_policy
from .model import CorpusPolicy, ExemptionSets, ForbiddenFileRule, RuleClass

__all__ = [
    "DEFAULT_POLICY_FILENAME",
    "POLICY_ENV",
    "CorpusPolicy",
    "ExemptionSets",
    "ForbiddenFileRule",
    "RuleClass",
    "load_policy",
    "resolve_policy",
]
