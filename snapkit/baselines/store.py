"""Baseline store — reference images on disk plus their JSON registry."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path

from PIL import Image

from snapkit.executor.image_processor import encode_png
from snapkit.models.baseline import BaselineEntry, BaselineRegistry
from snapkit.models.snapshot import CapturedArtifact

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "registry.json"


class BaselineStore:
    """Manages reference images and their JSON registry."""

    def __init__(self, baselines_dir: Path):
        self.baselines_dir = Path(baselines_dir)
        self.registry_path = self.baselines_dir / REGISTRY_FILENAME

    def load(self) -> BaselineRegistry:
        """Load registry from disk, or create a new one."""
        if self.registry_path.exists():
            try:
                with open(self.registry_path) as f:
                    data = json.load(f)
                return BaselineRegistry(**data)
            except Exception as e:
                logger.warning("Failed to load baseline registry: %s. Creating new.", e)
        return BaselineRegistry()

    def save(self, registry: BaselineRegistry) -> None:
        """Persist registry to disk."""
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        registry.last_updated = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        with open(self.registry_path, "w") as f:
            json.dump(registry.model_dump(), f, indent=2, sort_keys=True)
        logger.debug("Saved baseline registry to %s", self.registry_path)

    def _baseline_key(self, identifier: str, index: int) -> str:
        return f"{identifier}.{index}"

    def image_path(self, identifier: str, index: int) -> Path:
        return self.baselines_dir / f"{self._baseline_key(identifier, index)}.png"

    def get_baseline(self, registry: BaselineRegistry, identifier: str, index: int) -> BaselineEntry | None:
        """Look up an existing reference, ignoring entries whose image is gone."""
        key = self._baseline_key(identifier, index)
        entry = registry.baselines.get(key)
        if entry is None:
            return None
        abs_path = self.baselines_dir / entry.image_path
        if not abs_path.exists():
            logger.warning("Baseline image missing for %s: %s", key, abs_path)
            return None
        return entry

    def load_image(self, entry: BaselineEntry) -> Image.Image:
        image = Image.open(self.baselines_dir / entry.image_path)
        image.load()
        return image

    def store_baseline(
        self,
        registry: BaselineRegistry,
        identifier: str,
        index: int,
        artifact: CapturedArtifact,
    ) -> BaselineEntry:
        """Write an artifact as the reference image and register it."""
        dest = self.image_path(identifier, index)
        dest.parent.mkdir(parents=True, exist_ok=True)
        data = encode_png(artifact.image)
        dest.write_bytes(data)

        width, height = artifact.pixel_size
        entry = BaselineEntry(
            identifier=identifier,
            index=index,
            width=width,
            height=height,
            scale=artifact.scale,
            image_path=str(dest.relative_to(self.baselines_dir)),
            captured_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            image_hash=hashlib.sha256(data).hexdigest(),
        )

        registry.baselines[self._baseline_key(identifier, index)] = entry
        logger.info("Stored baseline for %s.%d (%dx%d)", identifier, index, width, height)
        return entry
