"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from tagcut.core.errors import ErrorCode
from tagcut.output.console import ConsoleProtocol, Style
from tagcut.services.release.errors import ReleaseError, ReleaseErrorKind

_ERROR_CODES: dict[ReleaseErrorKind, ErrorCode] = {
    "repository_command_failed": ErrorCode.ENV_ERROR,
    "config_invalid": ErrorCode.ENV_ERROR,
    "publish_failed": ErrorCode.NETWORK_ERROR,
    "manifest_io_failed": ErrorCode.IO_ERROR,
}


def release_error_code(kind: ReleaseErrorKind) -> ErrorCode:
    """Exit code for an error kind; anything the user can fix is USER_ERROR."""
    return _ERROR_CODES.get(kind, ErrorCode.USER_ERROR)


def exit_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error.kind)))
