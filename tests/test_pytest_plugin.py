"""Tests for the snapshot_name fixture."""

import pytest

from snapkit.executor.runner import SnapshotRunner
from snapkit.models.config import HarnessConfig
from snapkit.models.device import CANVAS
from snapkit.models.snapshot import SnapshotRequest

pytest_plugins = ["snapkit.pytest_plugin"]

NO_DELAYS = HarnessConfig(render_delay=0, window_delay=0, snapshot_delay=0)


def test_snapshot_name_is_test_function_name(snapshot_name):
    assert snapshot_name == "test_snapshot_name_is_test_function_name"


@pytest.mark.parametrize("theme", ["light", "dark"])
def test_parametrize_suffix_dropped(snapshot_name, theme):
    assert snapshot_name == "test_parametrize_suffix_dropped"


class TestInClass:
    def test_method_name(self, snapshot_name):
        assert snapshot_name == "test_method_name"


@pytest.mark.asyncio
async def test_request_identifier_starts_with_test_name(snapshot_name, subject_factory, comparator):
    request = SnapshotRequest(subject_factory=subject_factory, test_name=snapshot_name, devices=[CANVAS])
    await SnapshotRunner(comparator, NO_DELAYS).assert_snapshots(request)

    assert comparator.identifiers == ["test_request_identifier_starts_with_test_name-Canvas-Light-1-default"]
    assert comparator.identifiers[0].startswith("test_request_identifier_starts_with_test_name-")
