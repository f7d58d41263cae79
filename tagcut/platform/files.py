"""Filesystem helpers for in-place manifest edits."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "read_text_exact"]


def read_text_exact(path: Path, *, encoding: str = "utf-8") -> str:
    """Read text without newline translation, so CRLF files round-trip."""
    return path.read_bytes().decode(encoding)


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace.

    Content is written verbatim (no newline translation). When the target
    already exists its permission bits are carried over to the new file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    mode: int | None = None
    if path.exists():
        mode = stat.S_IMODE(path.stat().st_mode)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
