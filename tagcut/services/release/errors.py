from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from tagcut.git.repository import GitError

ReleaseErrorKind = Literal[
    "usage_error",
    "invalid_version_format",
    "dirty_working_tree",
    "manifest_pattern_not_found",
    "manifest_io_failed",
    "version_unchanged",
    "ref_exists",
    "repository_command_failed",
    "publish_failed",
    "config_invalid",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload, rendered as one line plus a hint."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def repository_failed(e: GitError, *, hint: str | None = None) -> ReleaseError:
    return ReleaseError(
        kind="repository_command_failed",
        message=f"git {e.command} failed: {e.message}",
        hint=hint,
    )
