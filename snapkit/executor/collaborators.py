"""Interfaces the runner drives: subjects, scroll regions and comparators."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, Protocol

from snapkit.models.device import DeviceConfig
from snapkit.models.snapshot import CapturedArtifact, MatchResult


class Subject(Protocol):
    """A freshly rendered view under test."""

    async def layout(self) -> None:
        """Force a synchronous layout pass."""
        ...

    async def attach_to_window(self, size: tuple[int, int]) -> None:
        """Mount the subject as root of a host window of the given size."""
        ...

    async def run_appearance_lifecycle(self) -> None:
        ...

    async def present(self) -> None:
        """Make the host window key and visible."""
        ...

    async def capture(self, device: DeviceConfig) -> CapturedArtifact:
        ...

    async def close(self) -> None:
        ...


class ScrollRegion(Protocol):
    async def content_height(self) -> float:
        ...

    async def offset_in_subject(self) -> float:
        """Vertical origin of the region within its subject, safe-area inset included."""
        ...

    async def scroll_offset(self) -> float:
        ...

    async def scroll_to(self, y: float) -> None:
        ...


class Comparator(Protocol):
    def compare(self, artifact: CapturedArtifact, identifier: str, record: bool) -> MatchResult:
        """Compare against the reference for ``identifier``, or overwrite it when recording."""
        ...


SubjectFactory = Callable[[DeviceConfig], Awaitable[Subject]]
ScrollAccessor = Callable[[Subject], Awaitable[Optional[ScrollRegion]]]
