"""Corpus checks.

Each check takes the run context, raises a ``ScriptError`` subclass naming the
offending paths on failure, and returns a small summary mapping on success.
"""

from .base import CheckDef, CheckFunc
from .registry import CHECKS, get_check, list_checks, select_checks
from .runner import run_check, run_checks

__all__ = [
    "CHECKS",
    "CheckDef",
    "CheckFunc",
    "get_check",
    "list_checks",
    "run_check",
    "run_checks",
    "select_checks",
]
