from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from tagcut.services.release.semver import ReleaseVersion

ReleaseState = Literal[
    "start",
    "version_validated",
    "tree_verified_clean",
    "manifest_updated",
    "committed",
    "branched",
    "tagged",
    "published",
    "done",
]


@dataclass(frozen=True, slots=True)
class ReleaseRefs:
    """Branch and tag recorded for one release; both are ``v<version>``."""

    version: ReleaseVersion
    commit: str

    @property
    def name(self) -> str:
        return self.version.to_tag()

    @property
    def branch(self) -> str:
        return self.name

    @property
    def tag(self) -> str:
        return self.name

    @property
    def branch_ref(self) -> str:
        return f"refs/heads/{self.branch}"

    @property
    def tag_ref(self) -> str:
        return f"refs/tags/{self.tag}"

    @property
    def short_commit(self) -> str:
        return self.commit[:8]


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    version: str | None
    push: bool = False
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class PreparedRelease:
    refs: ReleaseRefs
    previous_version: str
    manifest: str
    pushed: bool
    state: ReleaseState
