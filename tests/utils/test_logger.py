"""Tests for the application logger utility."""

from __future__ import annotations

import logging

import pytest

import blokit.utils.logger as logger_mod
from blokit.utils.logger import configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the configured flag and handlers between tests."""
    root = logging.getLogger("blokit")
    original_level = root.level
    logger_mod._configured = False
    root.handlers.clear()

    yield

    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(original_level)
    root.propagate = True
    logger_mod._configured = False


def test_configure_logging_creates_log_file(tmp_path):
    configure_logging("INFO", log_dir=tmp_path)
    get_logger("services").info("hello")

    log_file = tmp_path / "blokit.log"
    assert log_file.exists()
    assert "hello" in log_file.read_text()


def test_configure_logging_is_idempotent(tmp_path):
    configure_logging("INFO", log_dir=tmp_path)
    configure_logging("DEBUG", log_dir=tmp_path)

    root = logging.getLogger("blokit")
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG


def test_get_logger_maps_names_into_app_hierarchy():
    assert get_logger().name == "blokit"
    assert get_logger("blokit").name == "blokit"
    assert get_logger("blokit.tasks.runner").name == "blokit.tasks.runner"
    assert get_logger("tests").name == "blokit.tests"
