# tests/conftest.py
"""Shared fixtures for the test suite."""

import pytest

from pose_builders import build_pose


@pytest.fixture
def canonical_pose():
    return build_pose()
