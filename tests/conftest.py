"""Pytest configuration and shared fixtures."""

from typing import Optional

import pytest
from PIL import Image

from snapkit.executor.animations import AnimationState
from snapkit.models.config import HarnessConfig
from snapkit.models.device import DeviceConfig
from snapkit.models.snapshot import CapturedArtifact, MatchResult


# ============================================================================
# Fake collaborators
# ============================================================================


class FakeSubject:
    """Subject that records every call made on it into a shared event list."""

    def __init__(self, index: int, events: list, color=(200, 30, 30, 255), fail_on: Optional[str] = None,
                 animations: Optional[AnimationState] = None):
        self.index = index
        self.events = events
        self.color = color
        self.fail_on = fail_on
        self.animations = animations
        self.closed = False
        self.captures = 0
        self.animations_seen: list[bool] = []

    def _record(self, event, *args):
        self.events.append((event, *args))
        if self.animations is not None:
            self.animations_seen.append(self.animations.enabled)
        if self.fail_on == event:
            raise RuntimeError(f"{event} failed")

    async def layout(self) -> None:
        self._record("layout")

    async def attach_to_window(self, size) -> None:
        self._record("attach_to_window", size)

    async def run_appearance_lifecycle(self) -> None:
        self._record("appearance")

    async def present(self) -> None:
        self._record("present")

    async def capture(self, device: DeviceConfig) -> CapturedArtifact:
        self._record("capture", device.name)
        self.captures += 1
        width = (device.width or 50) * int(device.scale)
        height = (device.height or 50) * int(device.scale)
        return CapturedArtifact(image=Image.new("RGBA", (width, height), self.color), scale=device.scale)

    async def close(self) -> None:
        self.events.append(("close",))
        self.closed = True


class FakeSubjectFactory:
    def __init__(self, fail_on: Optional[str] = None, animations: Optional[AnimationState] = None):
        self.events: list = []
        self.subjects: list[FakeSubject] = []
        self.devices: list[DeviceConfig] = []
        self.fail_on = fail_on
        self.animations = animations

    async def __call__(self, device: DeviceConfig) -> FakeSubject:
        self.events.append(("create", device.name))
        self.devices.append(device)
        subject = FakeSubject(len(self.subjects), self.events, fail_on=self.fail_on, animations=self.animations)
        self.subjects.append(subject)
        return subject


class FakeScrollRegion:
    def __init__(self, content_height: float, offset: float = 0.0):
        self._content_height = content_height
        self._offset = offset
        self.current = 0.0
        self.scrolled_to: list[float] = []

    async def content_height(self) -> float:
        return self._content_height

    async def offset_in_subject(self) -> float:
        return self._offset

    async def scroll_offset(self) -> float:
        return self.current

    async def scroll_to(self, y: float) -> None:
        self.scrolled_to.append(y)
        self.current = y


class RecordingComparator:
    """Comparator returning a fixed verdict and remembering what it was given."""

    def __init__(self, passed: bool = True):
        self.passed = passed
        self.calls: list[tuple[str, CapturedArtifact, bool]] = []

    def compare(self, artifact: CapturedArtifact, identifier: str, record: bool) -> MatchResult:
        self.calls.append((identifier, artifact, record))
        return MatchResult(
            identifier=identifier,
            passed=self.passed or record,
            recorded=record,
            message="ok" if self.passed else "different",
        )

    @property
    def identifiers(self) -> list[str]:
        return [c[0] for c in self.calls]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fast_config() -> HarnessConfig:
    """Harness config with recognisable settle delays."""
    return HarnessConfig(render_delay=0.1, window_delay=0.5, snapshot_delay=0.2)


@pytest.fixture
def phone() -> DeviceConfig:
    return DeviceConfig(name="Phone", width=400, height=800, scale=2.0)


@pytest.fixture
def subject_factory() -> FakeSubjectFactory:
    return FakeSubjectFactory()


@pytest.fixture
def comparator() -> RecordingComparator:
    return RecordingComparator()


@pytest.fixture(autouse=True)
def clear_record_env(monkeypatch):
    """Keep a developer's SNAPKIT_RECORD from leaking into tests."""
    monkeypatch.delenv("SNAPKIT_RECORD", raising=False)


def solid_image(size=(10, 10), color=(255, 0, 0), mode="RGB") -> Image.Image:
    return Image.new(mode, size, color)
