"""Shared pytest fixtures for sdiwire tests."""

import pytest

from sdiwire import Injector

pytest_plugins = ["sdiwire.integrations.pytest_plugin"]


@pytest.fixture()
def injector() -> Injector:
    """Injector with no bindings."""
    return Injector()
