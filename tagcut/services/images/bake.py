"""``docker buildx bake`` definition rendering.

The build itself is out of scope; this only writes the JSON description
the build system consumes:

    {
      "group": {"default": {"targets": ["notion-sync"]}},
      "target": {
        "notion-sync": {
          "context": ".",
          "dockerfile": "Dockerfile",
          "platforms": ["linux/amd64", "linux/arm64"],
          "tags": ["ghcr.io/local/notion-sync:main"]
        }
      }
    }
"""

from __future__ import annotations

import json
from pathlib import Path

from tagcut.core.config import ImageConfig
from tagcut.platform.files import atomic_write_text
from tagcut.services.images.tags import image_refs


def bake_definition(config: ImageConfig) -> dict[str, object]:
    target = config.target
    return {
        "group": {"default": {"targets": [target.name]}},
        "target": {
            target.name: {
                "context": target.context,
                "dockerfile": target.dockerfile,
                "platforms": list(target.platforms),
                "tags": image_refs(config),
            }
        },
    }


def render_bake(config: ImageConfig) -> str:
    return json.dumps(bake_definition(config), indent=2) + "\n"


def write_bake(config: ImageConfig, path: Path) -> None:
    """Write the definition; raises OSError like any file write."""
    atomic_write_text(path, render_bake(config))
