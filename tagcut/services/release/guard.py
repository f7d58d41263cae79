from __future__ import annotations

from tagcut.core.result import Err, Ok, Result
from tagcut.git.client import RepositoryClient
from tagcut.services.release.errors import ReleaseError, repository_failed

_MAX_LISTED_PATHS = 5


def ensure_clean_tree(client: RepositoryClient) -> Result[None, ReleaseError]:
    """Refuse to release while tracked files are modified or staged.

    Untracked files are ignored: they cannot end up in the release commit
    because only the manifest paths are staged.
    """
    status = client.status()
    if isinstance(status, Err):
        return Err(repository_failed(status.error))

    changes = status.value.tracked_changes
    if not changes:
        return Ok(None)

    paths = [e.path for e in changes[:_MAX_LISTED_PATHS]]
    if len(changes) > _MAX_LISTED_PATHS:
        paths.append(f"... (+{len(changes) - _MAX_LISTED_PATHS} more)")
    return Err(
        ReleaseError(
            kind="dirty_working_tree",
            message=f"working tree is dirty: {', '.join(paths)}",
            hint="commit or stash changes first",
        )
    )
