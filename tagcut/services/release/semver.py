from __future__ import annotations

import re
from dataclasses import dataclass, field

from tagcut.core.result import Err, Ok, Result
from tagcut.services.release.errors import ReleaseError

# Leading zeros are accepted ("01.2.3").
_VERSION_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)", re.ASCII)

VERSION_HINT = "expected MAJOR.MINOR.PATCH, e.g. 0.2.0"


@dataclass(frozen=True, slots=True, order=True)
class ReleaseVersion:
    major: int
    minor: int
    patch: int
    # The literal as typed; ref names and the manifest use it verbatim.
    text: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.text or f"{self.major}.{self.minor}.{self.patch}"

    def to_tag(self) -> str:
        return f"v{self}"


def parse_version(text: str) -> Result[ReleaseVersion, ReleaseError]:
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        return Err(
            ReleaseError(
                kind="invalid_version_format",
                message=f"invalid version: {text!r}",
                hint=VERSION_HINT,
            )
        )
    return Ok(ReleaseVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)), text=text))
