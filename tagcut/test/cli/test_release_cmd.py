from __future__ import annotations

from pathlib import Path

import pytest
import typer

from tagcut.cli.context import CLIContext
from tagcut.core.config import Config
from tagcut.git.memory import InMemoryRepository
from tagcut.git.repository import GitError
from tagcut.output.console import ConsoleProtocol, MockConsole

MANIFEST = '[package]\nname = "notion-sync"\nversion = "0.1.9"\n'


@pytest.fixture
def repo(tmp_path: Path) -> InMemoryRepository:
    (tmp_path / "Cargo.toml").write_text(MANIFEST, encoding="utf-8")
    return InMemoryRepository(tmp_path)


@pytest.fixture
def console(repo: InMemoryRepository, monkeypatch: pytest.MonkeyPatch) -> MockConsole:
    import tagcut.cli.commands.release_cmd as release_cmd

    console = MockConsole()
    ctx = CLIContext(repo_root=repo.path, config=Config(), console=console)

    def fake_make_console() -> MockConsole:
        return console

    def fake_build_context(_console: ConsoleProtocol | None = None) -> CLIContext:
        return ctx

    def fake_repository(_self: CLIContext, *, dry_run: bool = False) -> InMemoryRepository:
        return repo

    monkeypatch.setattr(release_cmd, "make_console", fake_make_console)
    monkeypatch.setattr(release_cmd, "build_context", fake_build_context)
    monkeypatch.setattr(CLIContext, "repository", fake_repository)
    return console


def _exit_code(excinfo: pytest.ExceptionInfo[typer.Exit]) -> int:
    return excinfo.value.exit_code


def test_release_success(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    release_cmd.release(version="0.2.0", push=False, dry_run=False)

    assert console.has_success()
    assert console.find("- branch: v0.2.0")
    assert console.find("- tag: v0.2.0")
    assert console.find("- Cargo.toml: 0.1.9 -> 0.2.0")
    assert console.find("tagcut publish 0.2.0")
    assert repo.pushed == []


def test_release_with_push(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    release_cmd.release(version="0.2.0", push=True, dry_run=False)

    assert console.find("- pushed: HEAD, v0.2.0, v0.2.0")
    assert len(repo.pushed) == 3


def test_release_dry_run_push_reports_would_push(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    release_cmd.release(version="0.2.0", push=True, dry_run=True)

    assert console.find("dry run: nothing was changed")
    assert console.find("- would push: HEAD, v0.2.0, v0.2.0")
    assert not console.find("- pushed:")


def test_release_missing_version_exits_1(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    with pytest.raises(typer.Exit) as excinfo:
        release_cmd.release(version=None, push=False, dry_run=False)

    assert _exit_code(excinfo) == 1
    assert console.find("usage: tagcut release")
    assert repo.calls == []


def test_release_invalid_version_exits_1(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    with pytest.raises(typer.Exit) as excinfo:
        release_cmd.release(version="abc", push=False, dry_run=False)

    assert _exit_code(excinfo) == 1
    assert console.has_error()
    assert (repo.path / "Cargo.toml").read_text(encoding="utf-8") == MANIFEST


def test_release_git_failure_exits_2(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    repo.fail["commit"] = GitError(command="commit", message="hook rejected")

    with pytest.raises(typer.Exit) as excinfo:
        release_cmd.release(version="0.2.0", push=False, dry_run=False)

    assert _exit_code(excinfo) == 2
    assert console.find("hint: stopped after 'manifest_updated'")


def test_release_push_failure_exits_4(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    repo.fail["push"] = GitError(command="push", message="could not resolve host")

    with pytest.raises(typer.Exit) as excinfo:
        release_cmd.release(version="0.2.0", push=True, dry_run=False)

    assert _exit_code(excinfo) == 4


def test_publish_existing_release(repo: InMemoryRepository, console: MockConsole) -> None:
    import tagcut.cli.commands.release_cmd as release_cmd

    release_cmd.release(version="0.2.0", push=False, dry_run=False)
    release_cmd.publish(version="0.2.0", dry_run=False)

    assert console.find("published v0.2.0 to origin")
    assert [refspec for _, refspec in repo.pushed] == ["HEAD", "refs/heads/v0.2.0", "refs/tags/v0.2.0"]
