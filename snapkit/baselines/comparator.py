"""Baseline comparator — records references and diffs captures against them."""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path

from PIL import Image, ImageChops

from snapkit.baselines.store import BaselineStore
from snapkit.executor.image_processor import encode_png
from snapkit.models.baseline import BaselineRegistry
from snapkit.models.config import HarnessConfig
from snapkit.models.snapshot import CapturedArtifact, MatchResult

logger = logging.getLogger(__name__)


def diff_images(
    reference: Image.Image,
    actual: Image.Image,
    perceptual_precision: float = 1.0,
) -> tuple[float, Image.Image]:
    """Return the fraction of differing pixels and a difference image.

    A pixel differs when any channel is further apart than
    ``round((1 - perceptual_precision) * 255)``: 1.0 demands identical values,
    0.8 tolerates a delta of 51 out of 255.

    This approximates a perceptual colour distance. Tools that threshold the
    CIE94 colour difference at ``(1 - perceptual_precision) * 100`` weigh
    lightness, chroma and hue separately, so they accept a somewhat different
    set of pixels at the same precision.
    """
    ref = reference.convert("RGB")
    act = actual.convert("RGB")
    delta = ImageChops.difference(ref, act)

    r, g, b = delta.split()
    per_pixel = ImageChops.lighter(ImageChops.lighter(r, g), b)
    threshold = round((1.0 - perceptual_precision) * 255)
    histogram = per_pixel.histogram()
    differing = sum(histogram[threshold + 1:])

    total = ref.width * ref.height
    if total == 0:
        return 0.0, delta
    return differing / total, delta


class BaselineComparator:
    """File backed comparator.

    Several captures may share one identifier (every page of a scroll region
    does). Each compare() call takes the next index for its identifier, so the
    references are stored as ``{identifier}.1.png``, ``{identifier}.2.png``, ...
    in capture order. SnapshotRunner calls reset() before every assertion.
    """

    def __init__(
        self,
        store: BaselineStore,
        failures_dir: Path | None = None,
        precision: float = 1.0,
        perceptual_precision: float = 1.0,
        record_missing: bool = True,
    ):
        self.store = store
        self.failures_dir = Path(failures_dir) if failures_dir else store.baselines_dir / "failures"
        self.precision = precision
        self.perceptual_precision = perceptual_precision
        self.record_missing = record_missing
        self._counters: dict[str, int] = defaultdict(int)
        self._registry: BaselineRegistry | None = None

    @classmethod
    def from_config(cls, config: HarnessConfig) -> "BaselineComparator":
        return cls(
            store=BaselineStore(Path(config.baselines_dir)),
            failures_dir=Path(config.failures_dir),
            precision=config.precision,
            perceptual_precision=config.resolved_perceptual_precision,
            record_missing=config.record_missing,
        )

    @property
    def registry(self) -> BaselineRegistry:
        if self._registry is None:
            self._registry = self.store.load()
        return self._registry

    def reset(self) -> None:
        """Start numbering identifiers from 1 again."""
        self._counters.clear()

    def compare(self, artifact: CapturedArtifact, identifier: str, record: bool) -> MatchResult:
        self._counters[identifier] += 1
        index = self._counters[identifier]
        reference_path = self.store.image_path(identifier, index)

        if record:
            self._record(identifier, index, artifact)
            return MatchResult(
                identifier=identifier,
                index=index,
                reference=str(reference_path),
                passed=True,
                recorded=True,
                message=f"Recorded snapshot: {reference_path}",
            )

        entry = self.store.get_baseline(self.registry, identifier, index)
        if entry is None:
            actual_path = self._write_failure(identifier, index, "actual", artifact.image)
            if self.record_missing:
                self._record(identifier, index, artifact)
                message = f"No reference was found on disk. Automatically recorded snapshot: {reference_path}"
            else:
                message = f"No reference was found on disk: {reference_path}"
            return MatchResult(
                identifier=identifier,
                index=index,
                reference=str(reference_path),
                passed=False,
                recorded=self.record_missing,
                message=message,
                actual_path=str(actual_path),
            )

        reference = self.store.load_image(entry)
        if reference.size != artifact.image.size:
            actual_path = self._write_failure(identifier, index, "actual", artifact.image)
            return MatchResult(
                identifier=identifier,
                index=index,
                reference=str(reference_path),
                passed=False,
                message=(
                    f"Image size {artifact.image.width}x{artifact.image.height} does not match "
                    f"reference {reference.width}x{reference.height}"
                ),
                actual_path=str(actual_path),
            )

        diff_ratio, diff = diff_images(reference, artifact.image, self.perceptual_precision)
        passed = (1.0 - diff_ratio) >= self.precision
        msg = f"Pixel diff: {diff_ratio:.2%} (precision: {self.precision:.2%})"
        result = MatchResult(
            identifier=identifier,
            index=index,
            reference=str(reference_path),
            passed=passed,
            message=msg,
            diff_ratio=diff_ratio,
        )
        if not passed:
            result.actual_path = str(self._write_failure(identifier, index, "actual", artifact.image))
            result.diff_path = str(self._write_failure(identifier, index, "diff", diff))
        return result

    def _record(self, identifier: str, index: int, artifact: CapturedArtifact) -> None:
        self.store.store_baseline(self.registry, identifier, index, artifact)
        self.store.save(self.registry)

    def _write_failure(self, identifier: str, index: int, kind: str, image: Image.Image) -> Path:
        self.failures_dir.mkdir(parents=True, exist_ok=True)
        path = self.failures_dir / f"{identifier}.{index}.{kind}.png"
        path.write_bytes(encode_png(image))
        return path
