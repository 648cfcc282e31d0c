"""Shared fixtures for routegen tests."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import pytest
import structlog

from routegen.diagnostics import Diagnostics
from routegen.loader import ComponentRegistry, load_spec

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = FIXTURES / "petstore.yaml"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() calls made by CLI tests."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def _petstore() -> dict[str, Any]:
    return load_spec(PETSTORE)


@pytest.fixture
def petstore(_petstore) -> dict[str, Any]:
    """A fresh copy of the petstore spec; tests may mutate it."""
    return copy.deepcopy(_petstore)


@pytest.fixture
def registry(petstore) -> ComponentRegistry:
    return ComponentRegistry.from_spec(petstore)


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()


def make_spec(paths: dict[str, Any], **components: Any) -> dict[str, Any]:
    """Build a minimal OpenAPI document around paths."""
    spec: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": "Test API", "version": "1.2.3"},
        "paths": paths,
    }
    if components:
        spec["components"] = components
    return spec
