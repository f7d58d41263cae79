"""Release flow.

    start -> version_validated -> tree_verified_clean -> manifest_updated
          -> committed -> branched -> tagged -> [published] -> done

Every step is fail-fast. All checks that can be made up front (version
shape, clean tree, manifest pattern, ref availability) run before the first
mutation, so any failure up to ``tree_verified_clean`` leaves the repository
untouched and the whole command can simply be rerun. Failures after that
point are reported with the state that was reached; nothing is rolled back.
"""

from __future__ import annotations

from dataclasses import replace

from tagcut.core.config import ReleaseConfig
from tagcut.core.result import Err, Ok, Result
from tagcut.git.client import RepositoryClient
from tagcut.output.console import ConsoleProtocol, Style
from tagcut.services.release.committer import commit_release, ensure_refs_available, release_paths
from tagcut.services.release.errors import ReleaseError
from tagcut.services.release.guard import ensure_clean_tree
from tagcut.services.release.manifest import bump_manifest, read_manifest_version
from tagcut.services.release.model import PreparedRelease, ReleaseRequest, ReleaseState
from tagcut.services.release.publish import load_local_release, publish_release
from tagcut.services.release.semver import VERSION_HINT, ReleaseVersion, parse_version

_LEFT_BEHIND: dict[ReleaseState, str] = {
    "manifest_updated": "the manifest was rewritten but not committed",
    "committed": "the release commit exists; branch and tag were not created",
    "branched": "the release commit and branch exist; the tag was not created",
}


class _Progress:
    def __init__(self, console: ConsoleProtocol) -> None:
        self.state: ReleaseState = "start"
        self._console = console

    def __call__(self, state: ReleaseState) -> None:
        self.state = state
        self._console.print(f"state: {state}", Style.DIM)


def _with_state(error: ReleaseError, state: ReleaseState) -> ReleaseError:
    left = _LEFT_BEHIND.get(state)
    if left is None:
        return error
    hint = f"stopped after '{state}': {left}; inspect `git status` and `git log -1` before retrying"
    return replace(error, hint=hint if error.hint is None else f"{error.hint}; {hint}")


def _preflight(
    *,
    client: RepositoryClient,
    version: ReleaseVersion,
    config: ReleaseConfig,
) -> Result[tuple[str, list[str]], ReleaseError]:
    """Return the current manifest version and the paths to commit."""
    manifest = client.path / config.manifest
    current = read_manifest_version(manifest)
    if isinstance(current, Err):
        return current
    if current.value == str(version):
        return Err(
            ReleaseError(
                kind="version_unchanged",
                message=f"{manifest.name} already declares version {version}",
                hint="pick a different version",
            )
        )

    refs_free = ensure_refs_available(client, version)
    if isinstance(refs_free, Err):
        return refs_free

    paths = release_paths(client, manifest=config.manifest, extra_paths=config.extra_paths)
    if isinstance(paths, Err):
        return paths
    return Ok((current.value, paths.value))


def check_version(text: str | None) -> Result[ReleaseVersion, ReleaseError]:
    """Validate the version argument of ``tagcut release``."""
    if text is None:
        return Err(
            ReleaseError(
                kind="usage_error",
                message="missing version argument",
                hint=f"usage: tagcut release <version> [--push]; {VERSION_HINT}",
            )
        )
    return parse_version(text)


def prepare_release(
    *,
    client: RepositoryClient,
    request: ReleaseRequest,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[PreparedRelease, ReleaseError]:
    progress = _Progress(console)

    parsed = check_version(request.version)
    if isinstance(parsed, Err):
        return parsed
    version = parsed.value
    progress("version_validated")

    console.header(f"Release {version.to_tag()}")

    clean = ensure_clean_tree(client)
    if isinstance(clean, Err):
        return clean
    progress("tree_verified_clean")

    checked = _preflight(client=client, version=version, config=config)
    if isinstance(checked, Err):
        return checked
    current, paths = checked.value

    console.print(f"{config.manifest}: {current} -> {version}", Style.DIM)
    previous = bump_manifest(client.path / config.manifest, version, dry_run=request.dry_run)
    if isinstance(previous, Err):
        return Err(_with_state(previous.error, progress.state))
    progress("manifest_updated")

    refs = commit_release(client, version, paths=paths, on_state=progress)
    if isinstance(refs, Err):
        return Err(_with_state(refs.error, progress.state))

    if request.push:
        published = publish_release(client, refs.value, remote=config.remote, console=console)
        if isinstance(published, Err):
            return published
        progress("published")

    progress("done")
    return Ok(
        PreparedRelease(
            refs=refs.value,
            previous_version=previous.value,
            manifest=config.manifest,
            pushed=request.push,
            state=progress.state,
        )
    )


def republish_release(
    *,
    client: RepositoryClient,
    version_text: str,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[PreparedRelease, ReleaseError]:
    """Run only the publish phase for a release prepared earlier."""
    parsed = parse_version(version_text)
    if isinstance(parsed, Err):
        return parsed

    console.header(f"Publish {parsed.value.to_tag()}")

    refs = load_local_release(client, parsed.value)
    if isinstance(refs, Err):
        return refs

    published = publish_release(client, refs.value, remote=config.remote, console=console)
    if isinstance(published, Err):
        return published

    return Ok(
        PreparedRelease(
            refs=refs.value,
            previous_version="",
            manifest=config.manifest,
            pushed=True,
            state="done",
        )
    )
