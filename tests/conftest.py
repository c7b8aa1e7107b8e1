"""Pytest configuration and shared fixtures for klaw-schema tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from klaw_schema import clear_log_hooks, global_registry, integer, object_, reset_config, string

if TYPE_CHECKING:
    from collections.abc import Generator

    from klaw_schema import ObjectSchema


@pytest.fixture(autouse=True)
def clean_globals() -> Generator[None]:
    """Restore global configuration, log hooks, and the registry around every test."""
    reset_config()
    clear_log_hooks()
    global_registry.clear()
    yield
    reset_config()
    clear_log_hooks()
    global_registry.clear()


@pytest.fixture
def user_schema() -> ObjectSchema:
    """Object schema with a required name and an optional age."""
    return object_({'name': string().min(1), 'age': integer().min(0).optional()})
