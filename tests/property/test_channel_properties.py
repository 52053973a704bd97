"""Property-based tests for target-scoped channel operations."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from starlette.applications import Starlette

from dualserve.channels.manager import ChannelManager
from dualserve.channels.target import Target
from dualserve.runtime.listener import Listener

targets = st.sampled_from(list(Target))


def _manager(plain: bool, encrypted: bool) -> ChannelManager:
    app = Starlette()
    http = Listener("http", app) if plain else None
    https = Listener("https", app, ssl_keyfile="k", ssl_certfile="c") if encrypted else None
    return ChannelManager(http, https)


@pytest.mark.property
class TestTargetIsolation:
    """A listener added for one target never reaches other servers."""

    @given(target=targets, plain=st.booleans(), encrypted=st.booleans())
    @settings(max_examples=50, deadline=None)
    def test_listener_reaches_matching_servers_only(self, target, plain, encrypted):
        manager = _manager(plain, encrypted)

        def callback(sid, data):
            pass

        manager.add_global_listener("x", callback, target)

        for kind in manager.targets:
            expected = [callback] if target.matches(kind) else []
            assert manager.server(kind).listeners("x") == expected

    @given(target=targets, plain=st.booleans(), encrypted=st.booleans())
    @settings(max_examples=50, deadline=None)
    def test_servers_exist_only_for_listeners(self, target, plain, encrypted):
        manager = _manager(plain, encrypted)

        assert (manager.server(Target.PLAIN) is not None) is plain
        assert (manager.server(Target.ENCRYPTED) is not None) is encrypted

    @given(operations=st.lists(st.tuples(st.booleans(), targets), max_size=10))
    @settings(max_examples=50, deadline=None)
    def test_add_remove_sequences(self, operations):
        manager = _manager(True, True)

        def callback(sid, data):
            pass

        expected = {Target.PLAIN: 0, Target.ENCRYPTED: 0}
        for add, target in operations:
            if add:
                manager.add_global_listener("x", callback, target)
            else:
                manager.remove_global_listener("x", target)
            for kind in expected:
                if target.matches(kind):
                    expected[kind] = expected[kind] + 1 if add else 0

        for kind, count in expected.items():
            assert len(manager.server(kind).listeners("x")) == count
