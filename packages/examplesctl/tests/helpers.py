from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from examplesctl.core.context import RunContext
from examplesctl.policy import CorpusPolicy

ROOT = Path(__file__).resolve().parents[3]
CHANNEL = "nightly-2025-01-09"

FAKE_FORMATTER = """\
import sys

path = sys.argv[-1]
with open(path, encoding="utf-8") as handle:
    text = handle.read()
if "BAD" in text:
    print(f"Diff in {path}")
    sys.stderr.write("misformatted\\n")
    sys.exit(1)
"""


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def write_manifest(project: Path, *, name: str | None = None, version: str = "0.1.0", edition: str | None = "2024") -> None:
    lines = ["[package]", f'name = "{name or project.name}"', f'version = "{version}"']
    if edition is not None:
        lines.append(f'edition = "{edition}"')
    lines += ["", "[dependencies]", 'clippy_utils = { git = "https://github.com/rust-lang/rust-clippy" }', ""]
    write(project / "Cargo.toml", "\n".join(lines))


def write_workspace_manifest(project: Path, members: list[str]) -> None:
    quoted = ", ".join(f'"{m}"' for m in members)
    write(project / "Cargo.toml", f"[workspace]\nmembers = [{quoted}]\nresolver = \"2\"\n")


def write_toolchain(project: Path, *, channel: str = CHANNEL, components: tuple[str, ...] = ("llvm-tools-preview", "rustc-dev")) -> None:
    quoted = ", ".join(f'"{c}"' for c in components)
    write(project / "rust-toolchain", f'[toolchain]\nchannel = "{channel}"\ncomponents = [{quoted}]\n')


def write_build_config(project: Path, target_dir: str, *, linker: str = "dylint-link") -> None:
    write(
        project / ".cargo/config.toml",
        f'[build]\ntarget-dir = "{target_dir}"\n\n[target.x86_64-unknown-linux-gnu]\nlinker = "{linker}"\n',
    )


def write_source(project: Path, body: str = "pub fn register() {}\n") -> None:
    write(project / "src/lib.rs", body)


def build_corpus(root: Path) -> Path:
    """A small corpus shaped like the real one.

    ``general``, ``supplementary`` and ``restriction`` are workspaces sharing a
    toolchain and build config at the category root; ``experimental`` and
    ``testing`` hold self-contained examples. Every build config resolves its
    target directory to ``<root>/../target/examples``.
    """
    for category, member in (("general", "alpha"), ("supplementary", "beta"), ("restriction", "gamma")):
        ws = root / category
        write_workspace_manifest(ws, [member])
        write_toolchain(ws)
        write_build_config(ws, "../../target/examples")
        write_manifest(ws / member, version="9.9.9" if category == "restriction" else "0.1.0")
        write_source(ws / member)
    for category, member in (("experimental", "delta"), ("testing", "epsilon")):
        project = root / category / member
        write_manifest(project)
        write_toolchain(project)
        write_build_config(project, "../../../target/examples")
        write_source(project)
    straggler = root / "testing" / "straggler"
    write_manifest(straggler)
    write_toolchain(straggler, channel="nightly-2023-01-19")
    write_build_config(straggler, "target")
    write_source(straggler)
    return root


def make_ctx(root: Path, policy: CorpusPolicy | None = None, **kwargs: object) -> RunContext:
    return RunContext.for_corpus(root, policy, quiet=True, **kwargs)


def fake_formatter(tmp_path: Path) -> tuple[str, ...]:
    script = write(tmp_path / "fake_fmt.py", FAKE_FORMATTER)
    return (sys.executable, str(script), "--check")


def run_examplesctl(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT / "packages/examplesctl/src")
    env["RUN_ID"] = "pytest-run"
    return subprocess.run(
        [sys.executable, "-m", "examplesctl", *args],
        cwd=(cwd or ROOT),
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )
