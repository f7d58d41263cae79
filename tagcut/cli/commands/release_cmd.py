from __future__ import annotations

import typer

from tagcut.cli.commands._helpers import exit_release_error
from tagcut.cli.context import build_context, make_console
from tagcut.core.result import Err
from tagcut.output.console import ConsoleProtocol, Style
from tagcut.services.release.model import PreparedRelease, ReleaseRequest
from tagcut.services.release.semver import parse_version
from tagcut.services.release.service import check_version, prepare_release, republish_release


def _print_summary(release: PreparedRelease, *, console: ConsoleProtocol, dry_run: bool) -> None:
    refs = release.refs
    console.newline()
    if dry_run:
        console.warning("dry run: nothing was changed")
    console.success("Release prepared:" if not dry_run else "Release plan:")
    console.print(f"- branch: {refs.branch}")
    console.print(f"- tag: {refs.tag}")
    if not dry_run:
        console.print(f"- commit: {refs.short_commit}")
    if release.previous_version:
        console.print(f"- {release.manifest}: {release.previous_version} -> {refs.version}")

    if release.pushed:
        verb = "would push" if dry_run else "pushed"
        console.print(f"- {verb}: HEAD, {refs.branch}, {refs.tag}")
        return

    console.newline()
    console.print("Next steps:", Style.BOLD)
    console.print(f"- push with: tagcut publish {refs.version}")


def release(
    version: str | None = typer.Argument(
        None,
        help="Version to release, MAJOR.MINOR.PATCH (e.g. 0.2.0).",
        show_default=False,
    ),
    push: bool = typer.Option(False, "--push", help="Publish HEAD, branch and tag to the remote."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print git commands without running them."),
) -> None:
    """Bump the manifest, commit, and create branch + tag v<version>."""
    console = make_console()
    checked = check_version(version)
    if isinstance(checked, Err):
        exit_release_error(checked.error, console)

    ctx = build_context(console)
    client = ctx.repository(dry_run=dry_run)

    result = prepare_release(
        client=client,
        request=ReleaseRequest(version=version, push=push, dry_run=dry_run),
        config=ctx.config.release,
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_release_error(result.error, ctx.console)

    _print_summary(result.value, console=ctx.console, dry_run=dry_run)


def publish(
    version: str = typer.Argument(..., help="Version of a release prepared earlier."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print git commands without running them."),
) -> None:
    """Publish an existing local release (HEAD, branch and tag) to the remote."""
    console = make_console()
    checked = parse_version(version)
    if isinstance(checked, Err):
        exit_release_error(checked.error, console)

    ctx = build_context(console)
    client = ctx.repository(dry_run=dry_run)

    result = republish_release(
        client=client,
        version_text=version,
        config=ctx.config.release,
        console=ctx.console,
    )
    if isinstance(result, Err):
        exit_release_error(result.error, ctx.console)

    refs = result.value.refs
    ctx.console.success(f"published {refs.name} to {ctx.config.release.remote}")
