"""Shared test fixtures."""

import os
import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from structmap import Mapper, MapperSettings


@pytest.fixture
def clean_environment(monkeypatch):
    """Keep STRUCTMAP_* variables from the host out of the defaults."""
    for name in list(os.environ):
        if name.startswith("STRUCTMAP_"):
            monkeypatch.delenv(name)


@pytest.fixture
def settings(clean_environment):
    """Settings with library defaults."""
    return MapperSettings()


@pytest.fixture
def mapper(settings):
    """Mapper with default policy."""
    return Mapper(settings=settings)
