"""End-to-end request pipeline tests over a live plaintext listener."""

import httpx
import pytest
import pytest_asyncio
from starlette.responses import PlainTextResponse

from dualserve.channels.target import Target
from dualserve.middlewares.middleware import Middleware
from dualserve.routers.router import Router
from dualserve.runtime.server import WebServer


async def tag_a(request, call_next):
    request.state.tag = "A"
    return await call_next(request)


async def tag_b(request, call_next):
    request.state.tag += "B"
    return await call_next(request)


async def reply_tag(request, call_next):
    return PlainTextResponse(request.state.tag)


async def _ok(request, call_next):
    return PlainTextResponse("ok")


@pytest_asyncio.fixture
async def server():
    server = WebServer({"host": "127.0.0.1", "http": {"enable": True, "port": 0}})
    yield server
    await server.stop()


def _base_url(server):
    return f"http://127.0.0.1:{server.http_listener.port}"


@pytest.mark.integration
class TestPipeline:
    """Root middleware, router middleware and routes compose in order."""

    @pytest.mark.asyncio
    async def test_root_then_router_middleware(self, server):
        server.middlewares.add(Middleware(tag_a))
        api = Router()
        api.middlewares.add(Middleware(tag_b))
        api.routers.add_route("GET", "/ping", Middleware(reply_tag))
        server.routers.add_router("/api", api)

        await server.start()
        async with httpx.AsyncClient(base_url=_base_url(server), trust_env=False) as client:
            response = await client.get("/api/ping")

        assert response.status_code == 200
        assert response.text == "AB"

    @pytest.mark.asyncio
    async def test_route_added_after_start(self, server):
        server.middlewares.add(Middleware(tag_a))
        api = Router()
        api.middlewares.add(Middleware(tag_b))
        server.routers.add_router("/api", api)
        await server.start()

        api.routers.add_route("GET", "/late", Middleware(reply_tag))
        async with httpx.AsyncClient(base_url=_base_url(server), trust_env=False) as client:
            response = await client.get("/api/late")

        assert response.text == "AB"

    @pytest.mark.asyncio
    async def test_unknown_path(self, server):
        await server.start()

        async with httpx.AsyncClient(base_url=_base_url(server), trust_env=False) as client:
            response = await client.get("/nowhere")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_stop_twice(self, server):
        await server.start()
        assert server.http_listener.listening is True

        await server.stop()
        await server.stop()

        assert server.http_listener.listening is False
        assert server.http_listener.port is None

    @pytest.mark.asyncio
    async def test_restart_serves_again(self, server):
        server.middlewares.add(Middleware(tag_a))
        server.routers.add_route("GET", "/tag", Middleware(reply_tag))

        await server.start()
        await server.stop()
        await server.start()
        async with httpx.AsyncClient(base_url=_base_url(server), trust_env=False) as client:
            response = await client.get("/tag")

        assert response.text == "A"

    @pytest.mark.asyncio
    async def test_set_options_rebinds(self, server):
        await server.start()
        first = server.http_listener

        await server.set_options({"host": "127.0.0.1", "http": {"enable": True, "port": 0}})

        assert first.listening is False
        assert server.is_running is False
        await server.start()
        assert server.http_listener.listening is True

    @pytest.mark.asyncio
    async def test_encrypted_failure_leaves_plaintext_serving(self, tmp_path):
        server = WebServer(
            {
                "host": "127.0.0.1",
                "http": {"enable": True, "port": 0},
                "https": {
                    "enable": True,
                    "port": 0,
                    "private_key": str(tmp_path / "missing.key"),
                    "certificate": str(tmp_path / "missing.crt"),
                },
                "channels": {"enable": True},
            }
        )
        server.routers.add_route("GET", "/ok", Middleware(_ok))
        try:
            await server.start()
            async with httpx.AsyncClient(base_url=_base_url(server), trust_env=False) as client:
                response = await client.get("/ok")

            assert response.text == "ok"
            assert server.https_listener.listening is False
            assert list(server.start_errors) == [Target.ENCRYPTED]
            assert server.channels.targets == (Target.PLAIN,)
        finally:
            await server.stop()

