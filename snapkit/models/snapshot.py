"""Snapshot request, captured artifact and match result data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from PIL import Image
from pydantic import BaseModel

from snapkit.models.device import DEFAULT_DEVICES, DeviceConfig
from snapkit.models.type_size import TypeSize

if TYPE_CHECKING:
    from snapkit.executor.collaborators import ScrollAccessor, SubjectFactory


@dataclass
class CapturedArtifact:
    image: Image.Image  # pixel buffer
    scale: float = 1.0

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def size(self) -> tuple[float, float]:
        """Logical size in points."""
        width, height = self.image.size
        return (width / self.scale, height / self.scale)


@dataclass
class SnapshotRequest:
    """Everything one snapshot assertion needs; built per test invocation."""

    subject_factory: SubjectFactory
    test_name: str
    scroll_accessor: Optional[ScrollAccessor] = None
    devices: list[DeviceConfig] = field(default_factory=lambda: list(DEFAULT_DEVICES))
    type_size: TypeSize = TypeSize.LARGE
    docc_sizes: frozenset[TypeSize] = frozenset()
    mount_in_window: bool = False


class MatchResult(BaseModel):
    identifier: str
    index: int = 1  # position among captures sharing the identifier
    reference: str = ""  # path of the reference image
    passed: bool = False
    recorded: bool = False
    message: str = ""
    diff_ratio: Optional[float] = None
    actual_path: Optional[str] = None
    diff_path: Optional[str] = None
