"""Pytest fixtures for snapshot tests."""

import pytest

from snapkit.naming import name_from_nodeid


@pytest.fixture
def snapshot_name(request) -> str:
    """Name of the running test function, used as the snapshot test name.

    Parametrized tests share one name; pass ``test_name`` explicitly to keep
    their references apart.
    """
    return name_from_nodeid(request.node.nodeid)
