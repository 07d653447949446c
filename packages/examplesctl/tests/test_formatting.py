from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from examplesctl.checks.formatting import check_formatting
from examplesctl.errors import DiscoveryError, FormattingViolation, ScriptError
from examplesctl.exit_codes import ERR_PREREQ
from examplesctl.policy import CorpusPolicy
from helpers import fake_formatter, make_ctx, write


def _policy(tmp_path: Path) -> CorpusPolicy:
    return replace(CorpusPolicy(), formatter=fake_formatter(tmp_path))


def test_formatting_passes_when_all_files_are_clean(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    for name in ("a", "b", "c"):
        write(root / "general" / name / "src/lib.rs", "fn ok() {}\n")
    assert check_formatting(make_ctx(root, _policy(tmp_path))) == {"checked_files": 3}


def test_formatting_reports_every_failing_file_once(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    write(root / "general" / "a" / "src/lib.rs", "fn ok() {}\n")
    write(root / "general" / "b" / "src/lib.rs", "fn BAD( ) {}\n")
    write(root / "testing" / "c" / "src/main.rs", "fn BAD(){}\n")
    write(root / "testing" / "c" / "README.md", "BAD but not a source file\n")
    with pytest.raises(FormattingViolation) as excinfo:
        check_formatting(make_ctx(root, _policy(tmp_path)))
    failures = excinfo.value.failures
    assert [f.path for f in failures] == [root / "general/b/src/lib.rs", root / "testing/c/src/main.rs"]
    assert all(f.code == 1 for f in failures)
    assert "Diff in" in failures[0].stdout
    assert "misformatted" in failures[0].stderr
    message = str(excinfo.value)
    assert str(root / "general/b/src/lib.rs") in message
    assert str(root / "testing/c/src/main.rs") in message
    assert str(root / "general/a/src/lib.rs") not in message


def test_formatting_parallel_run_keeps_traversal_order(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    for idx in range(6):
        body = "fn BAD() {}\n" if idx % 2 else "fn ok() {}\n"
        write(root / "general" / f"p{idx}" / "src/lib.rs", body)
    with pytest.raises(FormattingViolation) as excinfo:
        check_formatting(make_ctx(root, _policy(tmp_path), jobs=4))
    assert [f.path.parent.parent.name for f in excinfo.value.failures] == ["p1", "p3", "p5"]


def test_formatting_missing_formatter_is_prereq_error(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    write(root / "general" / "a" / "src/lib.rs", "fn ok() {}\n")
    policy = replace(CorpusPolicy(), formatter=("examplesctl-no-such-formatter", "--check"))
    with pytest.raises(ScriptError) as excinfo:
        check_formatting(make_ctx(root, policy))
    assert excinfo.value.code == ERR_PREREQ
    assert excinfo.value.kind == "missing_tool"


def test_failure_render_includes_raw_output(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    write(root / "general" / "b" / "src/lib.rs", "fn BAD() {}\n")
    with pytest.raises(FormattingViolation) as excinfo:
        check_formatting(make_ctx(root, _policy(tmp_path)))
    rendered = excinfo.value.failures[0].render()
    assert rendered.startswith(f"format check failed for: {root / 'general/b/src/lib.rs'}")
    assert "misformatted" in rendered


def test_formatting_absent_root_is_discovery_error(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError, match="does not exist"):
        check_formatting(make_ctx(tmp_path / "absent", _policy(tmp_path)))


def test_formatting_violation_message_carries_formatter_output(tmp_path: Path) -> None:
    root = tmp_path / "examples"
    bad = write(root / "general" / "b" / "src/lib.rs", "fn BAD( ) {}\n")
    with pytest.raises(FormattingViolation) as excinfo:
        check_formatting(make_ctx(root, _policy(tmp_path)))
    message = str(excinfo.value)
    assert f"format check failed for: {bad}" in message
    assert f"Diff in {bad}" in message
    assert "misformatted" in message
