"""Version manifest editing.

The manifest is edited as text, not parsed: exactly one line must look like
``version = "X.Y.Z"`` (single or double quotes, spaces or tabs around ``=``),
and only the ``X.Y.Z`` payload of that line is replaced. Everything else,
including line endings and trailing comments, is written back unchanged.
"""

from __future__ import annotations

import re
from pathlib import Path

from tagcut.core.result import Err, Ok, Result
from tagcut.platform.files import atomic_write_text, read_text_exact
from tagcut.services.release.errors import ReleaseError
from tagcut.services.release.semver import ReleaseVersion

_VERSION_LINE_RE = re.compile(
    r"""^(?P<key>version[ \t]*=[ \t]*)(?P<quote>["'])(?P<version>\d+\.\d+\.\d+)(?P=quote)""",
    re.MULTILINE | re.ASCII,
)


def _find_version_line(text: str, *, name: str) -> Result[re.Match[str], ReleaseError]:
    matches = list(_VERSION_LINE_RE.finditer(text))
    if not matches:
        return Err(
            ReleaseError(
                kind="manifest_pattern_not_found",
                message=f'no `version = "X.Y.Z"` line in {name}',
                hint="the manifest must declare its version on a line of its own",
            )
        )
    if len(matches) > 1:
        lines = [str(text.count("\n", 0, m.start()) + 1) for m in matches]
        return Err(
            ReleaseError(
                kind="manifest_pattern_not_found",
                message=f"{name} has {len(matches)} version lines (lines {', '.join(lines)})",
                hint="exactly one version declaration is expected",
            )
        )
    return Ok(matches[0])


def replace_version(text: str, version: ReleaseVersion, *, name: str) -> Result[tuple[str, str], ReleaseError]:
    """Return ``(new_text, previous_version)`` without touching the filesystem."""
    found = _find_version_line(text, name=name)
    if isinstance(found, Err):
        return found

    m = found.value
    start, end = m.span("version")
    return Ok((text[:start] + str(version) + text[end:], m.group("version")))


def _read(path: Path) -> Result[str, ReleaseError]:
    try:
        return Ok(read_text_exact(path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(
            ReleaseError(
                kind="manifest_io_failed",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )


def read_manifest_version(path: Path) -> Result[str, ReleaseError]:
    text = _read(path)
    if isinstance(text, Err):
        return text
    found = _find_version_line(text.value, name=path.name)
    if isinstance(found, Err):
        return found
    return Ok(found.value.group("version"))


def bump_manifest(path: Path, version: ReleaseVersion, *, dry_run: bool = False) -> Result[str, ReleaseError]:
    """Rewrite the manifest version in place and return the previous one."""
    text = _read(path)
    if isinstance(text, Err):
        return text

    replaced = replace_version(text.value, version, name=path.name)
    if isinstance(replaced, Err):
        return replaced

    new_text, previous = replaced.value
    if dry_run:
        return Ok(previous)

    try:
        atomic_write_text(path, new_text)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_io_failed",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(previous)
