"""Tests for MiddlewareCollection."""

from pathlib import Path

import pytest

from dualserve.middlewares.collection import MiddlewareCollection
from dualserve.middlewares.middleware import Middleware
from dualserve.middlewares.static import StaticMiddleware
from dualserve.middlewares.upload import UploadMiddleware
from tests.helpers.fakes import make_callback


def _middlewares(*names):
    log: list[str] = []
    return [Middleware(make_callback(name, log)) for name in names]


@pytest.mark.unit
class TestMiddlewareCollection:
    """Tests for set/add/connect."""

    def test_initial_state(self, fake_origin):
        collection = MiddlewareCollection(fake_origin)

        assert collection.origin is fake_origin
        assert collection.middlewares == ()
        assert len(collection) == 0
        assert collection.connected is False

    def test_add_appends_in_order(self, fake_origin):
        a, b, c = _middlewares("a", "b", "c")
        collection = MiddlewareCollection(fake_origin)

        collection.add(a, b)
        collection.add(c)

        assert collection.middlewares == (a, b, c)
        assert list(collection) == [a, b, c]

    def test_set_replaces_sequence(self, fake_origin):
        a, b, c = _middlewares("a", "b", "c")
        collection = MiddlewareCollection(fake_origin)

        collection.set(a, b)
        collection.set(c)

        assert collection.middlewares == (c,)

    def test_connect_registers_in_order(self, fake_origin):
        a, b, c = _middlewares("a", "b", "c")
        collection = MiddlewareCollection(fake_origin)
        collection.add(a, b, c)

        collection.connect()

        assert fake_origin.used == [a.callback, b.callback, c.callback]
        assert collection.connected is True

    def test_connect_after_set_only_registers_replacement(self, fake_origin):
        a, b, c = _middlewares("a", "b", "c")
        collection = MiddlewareCollection(fake_origin)
        collection.set(a, b)
        collection.set(c)

        collection.connect()

        assert fake_origin.used == [c.callback]

    def test_connect_twice_double_registers(self, fake_origin):
        (a,) = _middlewares("a")
        collection = MiddlewareCollection(fake_origin)
        collection.add(a)

        collection.connect()
        collection.connect()

        assert fake_origin.used == [a.callback, a.callback]

    def test_reset_clears_connected_flag(self, fake_origin):
        collection = MiddlewareCollection(fake_origin)
        collection.connect()

        collection.reset()

        assert collection.connected is False

    def test_add_static(self, fake_origin, static_dir):
        collection = MiddlewareCollection(fake_origin)

        collection.add_static(static_dir)

        [middleware] = collection.middlewares
        assert isinstance(middleware, StaticMiddleware)
        assert middleware.path == static_dir

    def test_add_upload(self, fake_origin, tmp_path):
        collection = MiddlewareCollection(fake_origin)

        collection.add_upload(str(tmp_path / "uploads"), "avatar")

        [middleware] = collection.middlewares
        assert isinstance(middleware, UploadMiddleware)
        assert middleware.dest == Path(tmp_path / "uploads")
        assert middleware.field_name == "avatar"

    def test_add_upload_has_no_side_effects(self, fake_origin, tmp_path):
        collection = MiddlewareCollection(fake_origin)

        collection.add_upload(tmp_path / "uploads", "avatar")

        assert not (tmp_path / "uploads").exists()
        assert fake_origin.calls == []
