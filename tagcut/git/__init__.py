"""Git operations module.

- Repository: git CLI backed implementation
- RepositoryClient: the protocol the release flow is written against
- InMemoryRepository: in-memory implementation for tests

Usage:
    from tagcut.git import Repository

    repo = Repository(Path("."))
    clean = repo.status().map(lambda s: not s.has_tracked_changes)
"""

from tagcut.git.client import RepositoryClient
from tagcut.git.memory import InMemoryRepository
from tagcut.git.repository import (
    DRY_RUN_SHA,
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
    find_repo_root,
)

__all__ = [
    "DRY_RUN_SHA",
    "GitError",
    "GitStatus",
    "InMemoryRepository",
    "Repository",
    "RepositoryClient",
    "StatusEntry",
    "find_repo_root",
]
