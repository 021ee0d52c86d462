"""Snapshot identifier formatting."""

from __future__ import annotations

import re
from typing import Iterable

from snapkit.models.device import DeviceConfig
from snapkit.models.type_size import STANDARD_SIZES, TypeSize, label_of

SEPARATOR = "-"
DOCC_SUFFIX = "-Docc"


def combined_name(
    test_name: str,
    device: DeviceConfig,
    type_size: TypeSize,
    docc_sizes: Iterable[TypeSize] = (),
) -> str:
    """Build the identifier a snapshot is stored under.

    ``Profile-iPhone-Light-2-xxxLarge`` is test name, device name, trait,
    index of the type size in ``STANDARD_SIZES`` and its label. The index is
    left out for sizes outside the standard matrix, and ``-Docc`` is appended
    when the size is one of ``docc_sizes``.
    """
    type_index = None
    if type_size in STANDARD_SIZES:
        type_index = str(STANDARD_SIZES.index(type_size))
    traits = "Dark" if device.is_dark else "Light"
    parts = [test_name, device.name, traits, type_index, label_of(type_size)]
    name = SEPARATOR.join(p for p in parts if p is not None)
    suffix = DOCC_SUFFIX if type_size in set(docc_sizes) else ""
    return f"{name}{suffix}"


def name_from_nodeid(nodeid: str) -> str:
    """Default test name for a pytest node id.

    ``tests/test_profile.py::TestProfile::test_header[dark]`` -> ``test_header``
    """
    name = nodeid.split("::")[-1]
    return re.sub(r"\[.*\]$", "", name)
