"""Image reference expansion.

Pure functions: the registry, repository and tag list arrive in an
``ImageConfig``; nothing is read from the environment here.
"""

from __future__ import annotations

from collections.abc import Iterable

from tagcut.core.config import ImageConfig
from tagcut.services.release.semver import ReleaseVersion


def expand_image_refs(registry: str, repository: str, tags: Iterable[str]) -> list[str]:
    """Return ``registry/repository:tag`` for each tag, in input order.

    A tag given more than once yields a single reference at its first
    position. Tag characters are not validated; the build system does that.
    """
    refs: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        ref = f"{registry}/{repository}:{tag}"
        if ref in seen:
            continue
        seen.add(ref)
        refs.append(ref)
    return refs


def image_refs(config: ImageConfig) -> list[str]:
    return expand_image_refs(config.registry, config.repository, config.tags)


def with_release_tag(config: ImageConfig, version: ReleaseVersion) -> ImageConfig:
    """Append ``v<version>`` to the tag list so images carry the release name."""
    tag = version.to_tag()
    if tag in config.tags:
        return config
    return config.with_overrides(tags=(*config.tags, tag))
