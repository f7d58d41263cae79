"""In-memory ``RepositoryClient`` for tests and dry experiments.

It keeps refs in a dict and records every call, so tests can assert on
exactly which operations the release flow performed. Failures are injected
per operation name through ``fail``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tagcut.core.result import Err, Ok, Result
from tagcut.git.repository import GitError, GitStatus, StatusEntry

__all__ = ["InMemoryRepository", "RecordedCommit"]


@dataclass(frozen=True, slots=True)
class RecordedCommit:
    sha: str
    message: str
    paths: tuple[str, ...]


@dataclass
class InMemoryRepository:
    path: Path
    branch: str = "main"
    entries: list[StatusEntry] = field(default_factory=list)
    # Paths present on disk that git does not track (ignored or never added).
    untracked: set[str] = field(default_factory=set)
    refs: dict[str, str] = field(default_factory=dict)
    fail: dict[str, GitError] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    commits: list[RecordedCommit] = field(default_factory=list)
    pushed: list[tuple[str, str]] = field(default_factory=list)
    _staged: list[str] = field(default_factory=list)

    @property
    def head(self) -> str:
        return self.commits[-1].sha if self.commits else "f" * 40

    def status(self) -> Result[GitStatus, GitError]:
        self.calls.append("status")
        if "status" in self.fail:
            return Err(self.fail["status"])
        return Ok(GitStatus(branch=self.branch, entries=tuple(self.entries)))

    def ref_exists(self, ref: str) -> Result[bool, GitError]:
        self.calls.append(f"ref_exists {ref}")
        if "ref_exists" in self.fail:
            return Err(self.fail["ref_exists"])
        return Ok(ref in self.refs)

    def rev_parse(self, rev: str) -> Result[str, GitError]:
        rev = rev.removesuffix("^{commit}")
        if rev == "HEAD":
            return Ok(self.head)
        if rev in self.refs:
            return Ok(self.refs[rev])
        return Err(GitError(command="rev-parse", message=f"unknown revision: {rev}", returncode=128))

    def is_tracked(self, path: str) -> Result[bool, GitError]:
        self.calls.append(f"is_tracked {path}")
        if "is_tracked" in self.fail:
            return Err(self.fail["is_tracked"])
        return Ok((self.path / path).exists() and path not in self.untracked)

    def add(self, paths: Sequence[str]) -> Result[None, GitError]:
        self.calls.append("add " + " ".join(paths))
        if "add" in self.fail:
            return Err(self.fail["add"])
        self._staged.extend(p for p in paths if p not in self._staged)
        return Ok(None)

    def commit(self, message: str) -> Result[str, GitError]:
        self.calls.append(f"commit {message}")
        if "commit" in self.fail:
            return Err(self.fail["commit"])
        if not self._staged:
            return Err(GitError(command="commit", message="nothing to commit, working tree clean"))
        sha = f"{len(self.commits) + 1:040x}"
        self.commits.append(RecordedCommit(sha=sha, message=message, paths=tuple(self._staged)))
        self._staged.clear()
        return Ok(sha)

    def create_branch(self, name: str, start_point: str) -> Result[None, GitError]:
        self.calls.append(f"branch {name}")
        if "branch" in self.fail:
            return Err(self.fail["branch"])
        return self._create_ref(f"refs/heads/{name}", start_point, command="branch")

    def create_tag(self, name: str, target: str, message: str) -> Result[None, GitError]:
        self.calls.append(f"tag {name}")
        if "tag" in self.fail:
            return Err(self.fail["tag"])
        return self._create_ref(f"refs/tags/{name}", target, command="tag")

    def push(self, remote: str, refspec: str) -> Result[None, GitError]:
        self.calls.append(f"push {remote} {refspec}")
        error = self.fail.get(f"push {refspec}") or self.fail.get("push")
        if error is not None:
            return Err(error)
        self.pushed.append((remote, refspec))
        return Ok(None)

    def _create_ref(self, ref: str, target: str, *, command: str) -> Result[None, GitError]:
        if ref in self.refs:
            name = ref.rsplit("/", 1)[-1]
            return Err(GitError(command=command, message=f"'{name}' already exists", returncode=128))
        self.refs[ref] = target
        return Ok(None)
