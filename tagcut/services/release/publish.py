from __future__ import annotations

from tagcut.core.result import Err, Ok, Result
from tagcut.git.client import RepositoryClient
from tagcut.output.console import ConsoleProtocol, Style
from tagcut.services.release.errors import ReleaseError, repository_failed
from tagcut.services.release.model import ReleaseRefs
from tagcut.services.release.semver import ReleaseVersion


def push_targets(refs: ReleaseRefs) -> tuple[str, ...]:
    """Refspecs to publish, in order: current branch, release branch, tag."""
    return ("HEAD", refs.branch_ref, refs.tag_ref)


def publish_release(
    client: RepositoryClient,
    refs: ReleaseRefs,
    *,
    remote: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Push every target to ``remote``, stopping at the first failure.

    Each push is idempotent on the remote side, so the whole phase can be
    retried on its own once the cause is fixed.
    """
    done: list[str] = []
    for refspec in push_targets(refs):
        pushed = client.push(remote, refspec)
        if isinstance(pushed, Err):
            e = pushed.error
            progress = f"; already pushed: {', '.join(done)}" if done else ""
            return Err(
                ReleaseError(
                    kind="publish_failed",
                    message=f"push of {refspec} to {remote} failed: {e.message}{progress}",
                    hint=f"the release is intact locally; retry with `tagcut publish {refs.version}`",
                )
            )
        done.append(refspec)
        console.print(f"pushed {refspec} -> {remote}", Style.DIM)
    return Ok(None)


def load_local_release(client: RepositoryClient, version: ReleaseVersion) -> Result[ReleaseRefs, ReleaseError]:
    """Resolve an already prepared release from its local branch and tag."""
    name = version.to_tag()
    missing: list[str] = []
    for ref in (f"refs/heads/{name}", f"refs/tags/{name}"):
        exists = client.ref_exists(ref)
        if isinstance(exists, Err):
            return Err(repository_failed(exists.error))
        if not exists.value:
            missing.append(ref)

    if missing:
        return Err(
            ReleaseError(
                kind="usage_error",
                message=f"no local release {name}: missing {', '.join(missing)}",
                hint=f"prepare it first with `tagcut release {version}`",
            )
        )

    sha = client.rev_parse(f"refs/tags/{name}^{{commit}}")
    if isinstance(sha, Err):
        return Err(repository_failed(sha.error))
    return Ok(ReleaseRefs(version=version, commit=sha.value))
