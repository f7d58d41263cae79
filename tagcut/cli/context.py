from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from tagcut.core.config import Config, load_config_or_default
from tagcut.core.errors import ErrorCode
from tagcut.core.result import Err
from tagcut.git.repository import Repository, find_repo_root
from tagcut.output.console import ConsoleProtocol, RichConsole

REPO_ROOT_ENV = "TAGCUT_REPO_ROOT"
CONFIG_PATH_ENV = "TAGCUT_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    config: Config
    console: ConsoleProtocol

    def repository(self, *, dry_run: bool = False) -> Repository:
        """Git client for ``repo_root``; exits if it is not a repository."""
        repo = Repository(self.repo_root, console=self.console, dry_run=dry_run)
        if not repo.exists():
            self.console.error(f"not a git repository: {self.repo_root}")
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        return repo


def make_console() -> ConsoleProtocol:
    return RichConsole()


def build_context(console: ConsoleProtocol | None = None) -> CLIContext:
    """Resolve the repository root and load its config.

    The root is the top of the checkout containing ``--repo`` (or the
    current directory), so commands work from any subdirectory. Outside a
    checkout the directory itself is used; only git commands need one.
    """
    if console is None:
        console = make_console()

    env_root = os.environ.get(REPO_ROOT_ENV)
    start = Path(env_root) if env_root else Path.cwd()
    repo_root = find_repo_root(start) or start

    env_config = os.environ.get(CONFIG_PATH_ENV)
    config_result = load_config_or_default(repo_root, Path(env_config) if env_config else None)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(repo_root=repo_root, config=config_result.value, console=console)
