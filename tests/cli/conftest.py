"""Shared fixtures for CLI tests."""

import json
import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def restore_logger():
    """Commands re-point loguru at the runner's stderr; restore it afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def example_workdays_file(tmp_path):
    path = tmp_path / "workdays.json"
    path.write_text(
        json.dumps({"2026-01-01": True, "2026-01-02": True, "2026-01-05": True, "2026-01-06": True}),
        encoding="utf-8",
    )
    return path
