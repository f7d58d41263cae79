"""Release flow against a throwaway git repository with a bare remote."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from tagcut.cli.context import CONFIG_PATH_ENV, REPO_ROOT_ENV, build_context
from tagcut.core.config import ReleaseConfig
from tagcut.core.result import Err, Ok
from tagcut.git.repository import Repository, find_repo_root
from tagcut.output.console import MockConsole
from tagcut.services.release.model import ReleaseRequest
from tagcut.services.release.service import prepare_release

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", *args], cwd=str(cwd), capture_output=True, text=True, check=True
    )
    return proc.stdout.strip()


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    remote = tmp_path / "remote.git"
    work = tmp_path / "work"
    _git(tmp_path, "init", "--bare", str(remote))
    _git(tmp_path, "init", str(work))
    for key, value in (
        ("user.name", "Release Bot"),
        ("user.email", "release@example.com"),
        ("commit.gpgsign", "false"),
        ("tag.gpgsign", "false"),
    ):
        _git(work, "config", key, value)
    (work / "Cargo.toml").write_text('[package]\nname = "x"\nversion = "0.1.9"\n', encoding="utf-8")
    _git(work, "add", "Cargo.toml")
    _git(work, "commit", "-m", "init")
    _git(work, "remote", "add", "origin", str(remote))
    _git(work, "push", "-u", "origin", "HEAD")
    return work


def test_release_and_push(checkout: Path) -> None:
    result = prepare_release(
        client=Repository(checkout),
        request=ReleaseRequest("0.2.0", push=True),
        config=ReleaseConfig(),
        console=MockConsole(),
    )

    assert isinstance(result, Ok)
    sha = result.value.refs.commit
    assert _git(checkout, "rev-parse", "HEAD") == sha
    assert _git(checkout, "rev-parse", "refs/heads/v0.2.0") == sha
    assert _git(checkout, "rev-parse", "refs/tags/v0.2.0^{commit}") == sha
    assert _git(checkout, "cat-file", "-t", "refs/tags/v0.2.0") == "tag"
    assert _git(checkout, "log", "-1", "--format=%s") == "Release v0.2.0"
    assert _git(checkout, "ls-remote", "origin", "refs/tags/v0.2.0")


def test_second_release_of_same_version_fails(checkout: Path) -> None:
    first = prepare_release(
        client=Repository(checkout),
        request=ReleaseRequest("0.2.0"),
        config=ReleaseConfig(),
        console=MockConsole(),
    )
    assert isinstance(first, Ok)

    # Reset the manifest so the ref check is what stops the second run.
    (checkout / "Cargo.toml").write_text('[package]\nname = "x"\nversion = "0.1.9"\n', encoding="utf-8")
    _git(checkout, "commit", "-am", "back to 0.1.9")

    second = prepare_release(
        client=Repository(checkout),
        request=ReleaseRequest("0.2.0"),
        config=ReleaseConfig(),
        console=MockConsole(),
    )
    assert isinstance(second, Err)
    assert second.error.kind == "ref_exists"


def test_dry_run_changes_nothing(checkout: Path) -> None:
    head = _git(checkout, "rev-parse", "HEAD")
    console = MockConsole()

    result = prepare_release(
        client=Repository(checkout, console=console, dry_run=True),
        request=ReleaseRequest("0.2.0", push=True, dry_run=True),
        config=ReleaseConfig(),
        console=console,
    )

    assert isinstance(result, Ok)
    assert _git(checkout, "rev-parse", "HEAD") == head
    assert _git(checkout, "tag", "--list") == ""
    assert "version = \"0.1.9\"" in (checkout / "Cargo.toml").read_text(encoding="utf-8")
    assert "git push origin refs/tags/v0.2.0" in console.commands


def test_gitignored_lockfile_is_not_staged(checkout: Path) -> None:
    (checkout / ".gitignore").write_text("Cargo.lock\n", encoding="utf-8")
    _git(checkout, "add", ".gitignore")
    _git(checkout, "commit", "-m", "ignore lockfile")
    (checkout / "Cargo.lock").write_text("# lock\n", encoding="utf-8")

    result = prepare_release(
        client=Repository(checkout),
        request=ReleaseRequest("0.2.0"),
        config=ReleaseConfig(),
        console=MockConsole(),
    )

    assert isinstance(result, Ok)
    assert _git(checkout, "show", "--name-only", "--format=", "HEAD") == "Cargo.toml"
    assert _git(checkout, "status", "--porcelain") == ""


def test_unchanged_tracked_lockfile_does_not_block(checkout: Path) -> None:
    (checkout / "Cargo.lock").write_text("# lock\n", encoding="utf-8")
    _git(checkout, "add", "Cargo.lock")
    _git(checkout, "commit", "-m", "add lockfile")

    result = prepare_release(
        client=Repository(checkout),
        request=ReleaseRequest("0.2.0"),
        config=ReleaseConfig(),
        console=MockConsole(),
    )

    assert isinstance(result, Ok)
    assert _git(checkout, "show", "--name-only", "--format=", "HEAD") == "Cargo.toml"


def test_context_resolves_root_from_subdirectory(
    checkout: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    nested = checkout / "src" / "bin"
    nested.mkdir(parents=True)
    (checkout / "tagcut.toml").write_text('[release]\nremote = "upstream"\n', encoding="utf-8")
    monkeypatch.setenv(REPO_ROOT_ENV, str(nested))
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)

    assert find_repo_root(nested) == checkout.resolve()

    ctx = build_context(MockConsole())

    assert ctx.repo_root == checkout.resolve()
    assert ctx.config.release.remote == "upstream"
    assert ctx.repository().exists()
