"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the dualserve test suite.
"""

import logging
import socket
from collections.abc import Generator
from pathlib import Path

import pytest

from tests.helpers.fakes import FakeOrigin

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use network, filesystem)"
    )
    config.addinivalue_line("markers", "property: Property-based tests")


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def fake_origin() -> FakeOrigin:
    """Provide an origin that records registrations instead of dispatching."""
    return FakeOrigin()


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """Provide a directory with one static file."""
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "hello.txt").write_text("hello static")
    return directory


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Restore root logger handlers and level after the test."""
    handlers = list(logging.root.handlers)
    level = logging.root.level
    try:
        yield
    finally:
        for handler in logging.root.handlers:
            if handler not in handlers:
                handler.close()
        logging.root.handlers = handlers
        logging.root.setLevel(level)
