"""Shared test configuration."""

from __future__ import annotations

import pytest

from piboard.context import BoardContext
from piboard.layout.config import BoardConfig, SprintResolution


@pytest.fixture
def config():
    return BoardConfig(sprint_resolution=SprintResolution.FIRST)


@pytest.fixture
def ctx(config):
    return BoardContext(config=config)
