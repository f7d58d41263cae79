from __future__ import annotations

import os
from pathlib import Path

import typer

from tagcut import __version__
from tagcut.cli.commands.images_cmd import images_app
from tagcut.cli.commands.release_cmd import publish, release
from tagcut.cli.context import CONFIG_PATH_ENV, REPO_ROOT_ENV
from tagcut.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(release)
app.command()(publish)

# Sub-apps
app.add_typer(images_app, name="images", help="Image references and bake definitions.")


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Repository root (defaults to the current directory).",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (defaults to <repo>/tagcut.toml when present).",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[REPO_ROOT_ENV] = str(root)

    if config is not None:
        os.environ[CONFIG_PATH_ENV] = str(config.expanduser())


def main() -> None:
    app()
