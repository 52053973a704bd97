"""Fixtures for realtime channel tests."""

import pytest
from starlette.applications import Starlette

from dualserve.runtime.listener import Listener


@pytest.fixture
def app() -> Starlette:
    return Starlette()


@pytest.fixture
def http_listener(app) -> Listener:
    """Plaintext listener that is never started."""
    return Listener("http", app)


@pytest.fixture
def https_listener(app) -> Listener:
    """Encrypted listener that is never started."""
    return Listener("https", app, ssl_keyfile="key.pem", ssl_certfile="cert.pem")
