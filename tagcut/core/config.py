"""Typed configuration loading and access.

This module provides dataclasses for the optional ``tagcut.toml`` file:

    [release]
    manifest = "Cargo.toml"
    extra_paths = ["Cargo.lock"]
    remote = "origin"

    [images]
    registry = "ghcr.io"
    repository = "local/notion-sync"
    tags = ["main"]

    [images.target]
    name = "notion-sync"
    context = "."
    dockerfile = "Dockerfile"
    platforms = ["linux/amd64", "linux/arm64"]

Image settings also accept the ``REGISTRY``, ``REPOSITORY`` and ``TAGS``
environment variables, the same override points a bake file exposes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "BuildTarget",
    "Config",
    "ConfigError",
    "ImageConfig",
    "ReleaseConfig",
    "CONFIG_FILENAME",
    "find_config_path",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "tagcut.toml"

DEFAULT_MANIFEST = "Cargo.toml"
DEFAULT_EXTRA_PATHS: tuple[str, ...] = ("Cargo.lock",)
DEFAULT_REMOTE = "origin"

DEFAULT_REGISTRY = "ghcr.io"
DEFAULT_REPOSITORY = "local/notion-sync"
DEFAULT_TAGS: tuple[str, ...] = ("main",)

DEFAULT_TARGET_NAME = "notion-sync"
DEFAULT_CONTEXT = "."
DEFAULT_DOCKERFILE = "Dockerfile"
DEFAULT_PLATFORMS: tuple[str, ...] = ("linux/amd64", "linux/arm64")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Where the version lives and where releases are published."""

    manifest: str = DEFAULT_MANIFEST
    # Files that travel with the manifest in the release commit, staged only if present.
    extra_paths: tuple[str, ...] = DEFAULT_EXTRA_PATHS
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class BuildTarget:
    """Container build target handed to the external build system."""

    name: str = DEFAULT_TARGET_NAME
    context: str = DEFAULT_CONTEXT
    dockerfile: str = DEFAULT_DOCKERFILE
    platforms: tuple[str, ...] = DEFAULT_PLATFORMS


@dataclass(frozen=True, slots=True)
class ImageConfig:
    """Inputs for image reference expansion.

    Instances are immutable; ``with_env`` and ``with_overrides`` return
    new objects so expansion stays a pure function of its input.
    """

    registry: str = DEFAULT_REGISTRY
    repository: str = DEFAULT_REPOSITORY
    tags: tuple[str, ...] = DEFAULT_TAGS
    target: BuildTarget = field(default_factory=BuildTarget)

    def with_env(self, environ: Mapping[str, str]) -> ImageConfig:
        """Apply REGISTRY / REPOSITORY / TAGS (comma separated) overrides."""
        tags_raw = environ.get("TAGS", "")
        tags = tuple(t.strip() for t in tags_raw.split(",") if t.strip())
        return self.with_overrides(
            registry=environ.get("REGISTRY", "").strip() or None,
            repository=environ.get("REPOSITORY", "").strip() or None,
            tags=tags or None,
        )

    def with_overrides(
        self,
        *,
        registry: str | None = None,
        repository: str | None = None,
        tags: tuple[str, ...] | None = None,
    ) -> ImageConfig:
        return replace(
            self,
            registry=registry if registry is not None else self.registry,
            repository=repository if repository is not None else self.repository,
            tags=tags if tags is not None else self.tags,
        )


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    images: ImageConfig = field(default_factory=ImageConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: if a list-valued key holds something else.
        """
        release: StrDict = get_table(data, "release") or {}
        images: StrDict = get_table(data, "images") or {}
        target: StrDict = get_table(images, "target") or {}

        extra_paths = get_str_list(release, "extra_paths")

        return cls(
            release=ReleaseConfig(
                manifest=get_str(release, "manifest") or DEFAULT_MANIFEST,
                extra_paths=DEFAULT_EXTRA_PATHS if extra_paths is None else extra_paths,
                remote=get_str(release, "remote") or DEFAULT_REMOTE,
            ),
            images=ImageConfig(
                registry=get_str(images, "registry") or DEFAULT_REGISTRY,
                repository=get_str(images, "repository") or DEFAULT_REPOSITORY,
                tags=get_str_list(images, "tags") or DEFAULT_TAGS,
                target=BuildTarget(
                    name=get_str(target, "name") or DEFAULT_TARGET_NAME,
                    context=get_str(target, "context") or DEFAULT_CONTEXT,
                    dockerfile=get_str(target, "dockerfile") or DEFAULT_DOCKERFILE,
                    platforms=get_str_list(target, "platforms") or DEFAULT_PLATFORMS,
                ),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to tagcut.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def find_config_path(repo_root: Path, explicit: Path | None = None) -> Path | None:
    """Return the config file to load, or None when running on defaults.

    An explicit path is returned even if it does not exist, so the caller
    reports it instead of silently falling back.
    """
    if explicit is not None:
        return explicit
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config_or_default(repo_root: Path, explicit: Path | None = None) -> Result[Config, ConfigError]:
    """Load the repository config, or defaults when there is no file."""
    path = find_config_path(repo_root, explicit)
    if path is None:
        return Ok(Config())
    return load_config(path)
