"""Pytest configuration and fixtures for lracheck tests."""

import logging
from pathlib import Path

import pytest

from factories import method, participant
from lracheck.models.classmodel import MarkerKind


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo CLI logging setup so caplog sees lracheck records."""
    yield
    package_logger = logging.getLogger("lracheck")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def minimal_participant():
    """Plain-style participant with a single valid compensate callback."""
    return participant(method("compensate", MarkerKind.COMPENSATE))


@pytest.fixture
def resources_dir():
    """Directory with descriptor fixtures."""
    return Path(__file__).parent / "resources" / "descriptors"
