from __future__ import annotations

from collections.abc import Callable, Sequence

from tagcut.core.result import Err, Ok, Result
from tagcut.git.client import RepositoryClient
from tagcut.services.release.errors import ReleaseError, repository_failed
from tagcut.services.release.model import ReleaseRefs, ReleaseState
from tagcut.services.release.semver import ReleaseVersion


def commit_message(version: ReleaseVersion) -> str:
    return f"Release {version.to_tag()}"


def release_paths(
    client: RepositoryClient,
    *,
    manifest: str,
    extra_paths: Sequence[str],
) -> Result[list[str], ReleaseError]:
    """Manifest first, then the extra paths git tracks.

    An extra path that is missing, untracked or ignored (a gitignored
    ``Cargo.lock`` in a library crate) is left out; ``git add`` would
    refuse an ignored path.
    """
    paths = [manifest]
    for extra in extra_paths:
        if extra in paths:
            continue
        tracked = client.is_tracked(extra)
        if isinstance(tracked, Err):
            return Err(repository_failed(tracked.error))
        if tracked.value:
            paths.append(extra)
    return Ok(paths)


def ensure_refs_available(client: RepositoryClient, version: ReleaseVersion) -> Result[None, ReleaseError]:
    """Fail if the release branch or tag already exists.

    Runs before any mutation, so a second run for the same version stops
    without touching the manifest.
    """
    name = version.to_tag()
    for kind, ref in (("branch", f"refs/heads/{name}"), ("tag", f"refs/tags/{name}")):
        exists = client.ref_exists(ref)
        if isinstance(exists, Err):
            return Err(repository_failed(exists.error))
        if exists.value:
            return Err(
                ReleaseError(
                    kind="ref_exists",
                    message=f"{kind} {name} already exists",
                    hint=f"{name} was already released; publish it with `tagcut publish {version}`",
                )
            )
    return Ok(None)


def commit_release(
    client: RepositoryClient,
    version: ReleaseVersion,
    *,
    paths: Sequence[str],
    on_state: Callable[[ReleaseState], None] | None = None,
) -> Result[ReleaseRefs, ReleaseError]:
    """Stage, commit, then create branch and tag ``v<version>`` on that commit.

    Fail-fast: the first failing step aborts the rest and nothing is undone.
    """
    message = commit_message(version)
    name = version.to_tag()

    added = client.add(paths)
    if isinstance(added, Err):
        return Err(repository_failed(added.error))

    sha = client.commit(message)
    if isinstance(sha, Err):
        return Err(repository_failed(sha.error))
    if on_state is not None:
        on_state("committed")

    branch = client.create_branch(name, sha.value)
    if isinstance(branch, Err):
        return Err(repository_failed(branch.error))
    if on_state is not None:
        on_state("branched")

    tag = client.create_tag(name, sha.value, message)
    if isinstance(tag, Err):
        return Err(repository_failed(tag.error))
    if on_state is not None:
        on_state("tagged")

    return Ok(ReleaseRefs(version=version, commit=sha.value))
