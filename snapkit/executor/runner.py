"""Snapshot runner — renders a subject on each device and asserts its snapshots."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable, Optional

from snapkit.executor.animations import ANIMATIONS, AnimationSwitch, animations_suspended
from snapkit.executor.collaborators import Comparator, ScrollRegion, Subject
from snapkit.executor.image_processor import reduce
from snapkit.models.config import HarnessConfig
from snapkit.models.device import DeviceConfig
from snapkit.models.snapshot import MatchResult, SnapshotRequest
from snapkit.naming import combined_name

logger = logging.getLogger(__name__)


class SnapshotMismatchError(AssertionError):
    def __init__(self, results: list[MatchResult]):
        self.results = results
        failed = [r for r in results if not r.passed]
        lines = [f"{len(failed)} of {len(results)} snapshot(s) did not match:"]
        lines += [f"  {r.identifier} #{r.index}: {r.message}" for r in failed]
        super().__init__("\n".join(lines))


class SnapshotRecordedError(AssertionError):
    def __init__(self, results: list[MatchResult]):
        self.results = results
        recorded = [r.identifier for r in results if r.recorded]
        super().__init__(
            f"Record mode is on. Recorded {len(recorded)} snapshot(s); "
            "turn record mode off and re-run to assert against them."
        )


class SnapshotRunner:
    """Drives one snapshot assertion across a matrix of device configs.

    Devices are processed one after another: they share the animation switch
    and the host rendering surface.
    """

    def __init__(
        self,
        comparator: Comparator,
        config: HarnessConfig | None = None,
        animations: AnimationSwitch = ANIMATIONS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.comparator = comparator
        self.config = config or HarnessConfig()
        self.animations = animations
        self._sleep = sleep

    async def assert_snapshots(self, request: SnapshotRequest) -> list[MatchResult]:
        """Capture and compare every snapshot of ``request``.

        Comparator numbering restarts (via its ``reset()``, when it has one),
        so asserting the same request twice compares against the same
        references. Raises SnapshotMismatchError when any snapshot fails to
        match (and ``fail_on_mismatch`` is set), after all devices have been
        processed.
        """
        reset = getattr(self.comparator, "reset", None)
        if reset is not None:
            reset()
        results: list[MatchResult] = []
        with animations_suspended(self.animations):
            for device in request.devices:
                results.extend(await self._snapshot_device(request, device))

        if self.config.fail_on_mismatch and any(not r.passed for r in results):
            raise SnapshotMismatchError(results)
        if self.config.fail_on_record and any(r.recorded for r in results):
            raise SnapshotRecordedError(results)
        return results

    async def _snapshot_device(self, request: SnapshotRequest, device: DeviceConfig) -> list[MatchResult]:
        identifier = combined_name(request.test_name, device, request.type_size, request.docc_sizes)
        logger.info("Snapshotting %s", identifier)

        subject = await request.subject_factory(device)
        try:
            await subject.layout()
            # Let mocked network content resolve
            await self._sleep(self.config.render_delay)

            if request.mount_in_window:
                await self._mount(subject, device)

            results = [await self._assert_capture(subject, device, identifier)]

            if request.scroll_accessor is not None:
                region = await request.scroll_accessor(subject)
                if region is not None:
                    results.extend(await self._assert_scroll_pages(subject, device, region, identifier))
            return results
        finally:
            await subject.close()

    async def _mount(self, subject: Subject, device: DeviceConfig) -> None:
        width = device.width or self.config.window_default_width
        size = (width, self.config.window_height)
        logger.debug("Mounting subject in %dx%d window", *size)
        await subject.attach_to_window(size)
        await subject.run_appearance_lifecycle()
        await subject.layout()
        await subject.present()
        await self._sleep(self.config.window_delay)

    async def _assert_capture(self, subject: Subject, device: DeviceConfig, identifier: str) -> MatchResult:
        await self._sleep(self.config.snapshot_delay)
        artifact = reduce(await subject.capture(device))
        result = self.comparator.compare(artifact, identifier, self.config.record)
        if result.passed:
            logger.debug("%s: %s", identifier, result.message or "match")
        else:
            logger.warning("%s: %s", identifier, result.message)
        return result

    async def _assert_scroll_pages(
        self,
        subject: Subject,
        device: DeviceConfig,
        region: ScrollRegion,
        identifier: str,
    ) -> list[MatchResult]:
        """Snapshot every further page of scroll content; the first is already captured."""
        if device.size is None:
            logger.debug("%s has no fixed size, skipping scroll pages", device.name)
            return []

        origin = await region.offset_in_subject()
        page_height = device.height - origin
        if page_height <= 0:
            logger.warning(
                "Scroll region starts below the %s viewport (offset %.0f), skipping scroll pages",
                device.name, origin,
            )
            return []

        pages = page_count(await region.content_height(), page_height)
        logger.debug("%s: %d scroll page(s) of %.0fpx", identifier, pages, page_height)

        results: list[MatchResult] = []
        try:
            for page in range(1, pages):
                await region.scroll_to(page * page_height)
                results.append(await self._assert_capture(subject, device, identifier))
        finally:
            await region.scroll_to(0)
        return results


def page_count(content_height: float, page_height: float) -> int:
    """Number of viewport pages needed to show all scroll content (at least 1)."""
    if page_height <= 0:
        raise ValueError("page_height must be positive")
    return max(1, math.ceil(content_height / page_height))


async def assert_snapshots(
    request: SnapshotRequest,
    comparator: Comparator,
    config: Optional[HarnessConfig] = None,
) -> list[MatchResult]:
    """Convenience wrapper around SnapshotRunner.assert_snapshots."""
    return await SnapshotRunner(comparator, config).assert_snapshots(request)
