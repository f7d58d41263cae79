"""The narrow git capability the release flow depends on."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from tagcut.core.result import Result
from tagcut.git.repository import GitError, GitStatus

__all__ = ["RepositoryClient"]


class RepositoryClient(Protocol):
    """Operations needed to prepare and publish a release.

    ``Repository`` implements this against the git CLI and
    ``InMemoryRepository`` implements it in memory for tests.
    """

    path: Path

    def status(self) -> Result[GitStatus, GitError]: ...

    def ref_exists(self, ref: str) -> Result[bool, GitError]: ...

    def rev_parse(self, rev: str) -> Result[str, GitError]: ...

    def is_tracked(self, path: str) -> Result[bool, GitError]: ...

    def add(self, paths: Sequence[str]) -> Result[None, GitError]: ...

    def commit(self, message: str) -> Result[str, GitError]: ...

    def create_branch(self, name: str, start_point: str) -> Result[None, GitError]: ...

    def create_tag(self, name: str, target: str, message: str) -> Result[None, GitError]: ...

    def push(self, remote: str, refspec: str) -> Result[None, GitError]: ...
