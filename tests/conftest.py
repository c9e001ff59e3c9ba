"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Keep a developer's .env or shell from changing the plan under test
for _name in list(os.environ):
    if _name.upper().startswith("COMPENSATION_"):
        del os.environ[_name]

# Добавить корень проекта в PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from loguru import logger


@pytest.fixture
def captured_logs():
    """
    Collect loguru records emitted during the test.

    Returns:
        list: Records (dicts with "level", "message", "extra")
    """
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
