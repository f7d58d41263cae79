from __future__ import annotations

import os
from pathlib import Path

import typer

from tagcut.cli.commands._helpers import exit_release_error
from tagcut.cli.context import CLIContext, build_context
from tagcut.core.config import ImageConfig
from tagcut.core.errors import ErrorCode
from tagcut.core.result import Err
from tagcut.services.images.bake import render_bake, write_bake
from tagcut.services.images.tags import image_refs, with_release_tag
from tagcut.services.release.semver import parse_version

images_app = typer.Typer(add_completion=False, no_args_is_help=True)


def _resolve_images(
    ctx: CLIContext,
    *,
    registry: str | None,
    repository: str | None,
    tags: list[str] | None,
    release: str | None,
) -> ImageConfig:
    """Config file, then REGISTRY/REPOSITORY/TAGS env, then CLI flags."""
    config = ctx.config.images.with_env(os.environ).with_overrides(
        registry=registry,
        repository=repository,
        tags=tuple(tags) if tags else None,
    )
    if release is None:
        return config

    version = parse_version(release)
    if isinstance(version, Err):
        exit_release_error(version.error, ctx.console)
    return with_release_tag(config, version.value)


@images_app.command("refs")
def refs_cmd(
    registry: str | None = typer.Option(None, "--registry", help="Registry host (env: REGISTRY)."),
    repository: str | None = typer.Option(
        None, "--repository", help="Repository path (env: REPOSITORY)."
    ),
    tag: list[str] | None = typer.Option(
        None, "--tag", "-t", help="Tag name, repeatable (env: TAGS, comma separated)."
    ),
    release: str | None = typer.Option(None, "--release", help="Also tag as v<VERSION>."),
) -> None:
    """Print the fully-qualified image references, one per line."""
    ctx = build_context()
    config = _resolve_images(ctx, registry=registry, repository=repository, tags=tag, release=release)
    for ref in image_refs(config):
        typer.echo(ref)


@images_app.command("bake")
def bake_cmd(
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file instead of stdout."),
    registry: str | None = typer.Option(None, "--registry", help="Registry host (env: REGISTRY)."),
    repository: str | None = typer.Option(
        None, "--repository", help="Repository path (env: REPOSITORY)."
    ),
    tag: list[str] | None = typer.Option(
        None, "--tag", "-t", help="Tag name, repeatable (env: TAGS, comma separated)."
    ),
    release: str | None = typer.Option(None, "--release", help="Also tag as v<VERSION>."),
) -> None:
    """Render a docker buildx bake definition (JSON) for the configured target."""
    ctx = build_context()
    config = _resolve_images(ctx, registry=registry, repository=repository, tags=tag, release=release)

    if output is None:
        typer.echo(render_bake(config), nl=False)
        return

    try:
        write_bake(config, output)
    except OSError as e:
        ctx.console.error(f"failed to write {output}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    ctx.console.success(f"wrote {output}")
