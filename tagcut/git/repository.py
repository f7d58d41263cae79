"""Git repository abstraction.

``Repository`` runs the git CLI through ``platform.process.run`` and
implements ``RepositoryClient``. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/repo"), console=RichConsole())

    match repo.status():
        case Ok(status) if status.has_tracked_changes:
            print("dirty:", [e.path for e in status.tracked_changes])
        case Ok(_):
            print("clean")
        case Err(e):
            print(f"git {e.command} failed: {e.message}")

With ``dry_run=True`` mutating commands are echoed but not executed;
read-only commands (status, rev-parse) still run.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from tagcut.core.result import Err, Ok, Result
from tagcut.output.console import ConsoleProtocol
from tagcut.platform.process import ProcessError
from tagcut.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

DRY_RUN_SHA = "0" * 40

__all__ = [
    "DRY_RUN_SHA",
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "find_repo_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "commit", "push")
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_staged(self) -> bool:
        """True if the index differs from HEAD for this path."""
        return self.xy not in ("??", "!!") and self.xy[0] != " "

    @property
    def is_unstaged(self) -> bool:
        """True if the working tree differs from the index for this path."""
        return self.xy not in ("??", "!!") and self.xy[1] != " "


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed ``git status --porcelain=v1 -b``.

    Attributes:
        branch: Current branch name ("HEAD" when detached)
        entries: All status entries (staged, unstaged, untracked)
    """

    branch: str
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def tracked_changes(self) -> list[StatusEntry]:
        """Entries whose index or working tree differs from HEAD."""
        return [e for e in self.entries if e.is_staged or e.is_unstaged]

    @property
    def has_tracked_changes(self) -> bool:
        return bool(self.tracked_changes)


class Repository:
    """Git repository backed by the git CLI.

    Attributes:
        path: Path to the repository root
    """

    def __init__(
        self,
        path: Path,
        *,
        console: ConsoleProtocol | None = None,
        dry_run: bool = False,
    ) -> None:
        self.path = path
        self._console = console
        self._dry_run = dry_run

    def exists(self) -> bool:
        """Check if this is a git repository (``.git`` dir or worktree file)."""
        return (self.path / ".git").exists()

    # -- read-only -------------------------------------------------------

    def status(self) -> Result[GitStatus, GitError]:
        """Get repository status.

        Returns:
            Ok(GitStatus) on success
            Err(GitError) on failure
        """
        result = self._run(["status", "--porcelain=v1", "-b"])
        match result:
            case Err(e):
                return Err(_git_error("status", e))
            case Ok(stdout):
                return Ok(parse_status(stdout))

    def ref_exists(self, ref: str) -> Result[bool, GitError]:
        """Check whether a fully-qualified ref (``refs/tags/v1.0.0``) exists."""
        result = self._run(["rev-parse", "--verify", "--quiet", ref])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(_git_error("rev-parse", e))

    def rev_parse(self, rev: str) -> Result[str, GitError]:
        result = self._run(["rev-parse", "--verify", rev])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def is_tracked(self, path: str) -> Result[bool, GitError]:
        """Check whether ``path`` is in the index (ignored files are not)."""
        result = self._run(["ls-files", "--error-unmatch", "--", path])
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == 1:
                return Ok(False)
            case Err(e):
                return Err(_git_error("ls-files", e))

    # -- mutating --------------------------------------------------------

    def add(self, paths: Sequence[str]) -> Result[None, GitError]:
        return self._mutate(["add", "--", *paths]).map(lambda _: None)

    def commit(self, message: str) -> Result[str, GitError]:
        """Commit the index and return the new HEAD sha."""
        result = self._mutate(["commit", "-m", message])
        if isinstance(result, Err):
            return result
        if self._dry_run:
            return Ok(DRY_RUN_SHA)
        return self.rev_parse("HEAD")

    def create_branch(self, name: str, start_point: str) -> Result[None, GitError]:
        """Create a branch; fails if it already exists (no ``-f``)."""
        return self._mutate(["branch", name, start_point]).map(lambda _: None)

    def create_tag(self, name: str, target: str, message: str) -> Result[None, GitError]:
        """Create an annotated tag; fails if it already exists (no ``-f``)."""
        return self._mutate(["tag", "-a", name, "-m", message, target]).map(lambda _: None)

    def push(self, remote: str, refspec: str) -> Result[None, GitError]:
        return self._mutate(["push", remote, refspec]).map(lambda _: None)

    # -- internals -------------------------------------------------------

    def _mutate(self, args: list[str]) -> Result[str, GitError]:
        if self._console is not None:
            self._console.command(["git", *args])
        if self._dry_run:
            return Ok("")
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error(args[0], result.error))
        return Ok(result.value)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _git_error(command: str, e: ProcessError) -> GitError:
    return GitError(command=command, message=e.detail, returncode=e.returncode)


def find_repo_root(start: Path) -> Path | None:
    """Top-level directory of the checkout containing ``start``, if any."""
    result = run_process(
        ["git", "-C", str(start), "rev-parse", "--show-toplevel"],
        cwd=start,
        timeout=_GIT_TIMEOUT_SECONDS,
    )
    match result:
        case Ok(stdout) if stdout.strip():
            return Path(stdout.strip())
        case _:
            return None


def parse_status(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 -b`` output."""
    lines = [ln for ln in output.splitlines() if ln.strip()]
    if not lines or not lines[0].startswith("##"):
        return GitStatus(branch="", entries=_parse_entries(lines))

    return GitStatus(branch=_parse_branch_line(lines[0]), entries=_parse_entries(lines[1:]))


def _parse_branch_line(line: str) -> str:
    """Branch name from ``## branch...upstream [ahead N]``."""
    s = line[2:].strip()
    s = s.split(" [", 1)[0].strip()
    if s.startswith("No commits yet on "):
        s = s[len("No commits yet on ") :]
    return s.split("...", 1)[0].strip()


def _parse_entries(lines: list[str]) -> tuple[StatusEntry, ...]:
    entries: list[StatusEntry] = []
    for line in lines:
        if len(line) < 4:
            continue
        entries.append(StatusEntry(xy=line[:2], path=line[3:]))
    return tuple(entries)
