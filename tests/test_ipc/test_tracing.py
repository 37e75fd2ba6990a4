"""
Tests for the aiohttp trace integration.
"""

from types import SimpleNamespace
from unittest.mock import Mock

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils
from multidict import CIMultiDict
from yarl import URL

from ipc_metrics.ipc import IPC_CLIENT_CALL, create_trace_config
from ipc_metrics.monitoring import MemoryMetricsBackend, Registry, RegistryConfig, configure_registry


def _start_params(method="GET", url="http://api.example.com/v1/items?page=1"):
    return aiohttp.TraceRequestStartParams(method, URL(url), CIMultiDict())


def _end_params(status, method="GET", url="http://api.example.com/v1/items?page=1"):
    return aiohttp.TraceRequestEndParams(method, URL(url), CIMultiDict(), Mock(status=status))


def _exception_params(exc, method="GET", url="http://api.example.com/v1/items?page=1"):
    return aiohttp.TraceRequestExceptionParams(method, URL(url), CIMultiDict(), exc)


class TestTraceHooks:
    """Test the trace callbacks directly."""

    @pytest.fixture
    def trace_config(self, registry):
        return create_trace_config(registry)

    @pytest.mark.asyncio
    async def test_successful_request(self, trace_config, clock, memory_backend):
        """Start and end hooks record one successful call."""
        ctx = SimpleNamespace(trace_request_ctx=None)

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        clock.advance(5_000_000)
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))

        points = memory_backend.find(IPC_CLIENT_CALL)
        assert len(points) == 1
        assert points[0].value == pytest.approx(0.005)
        assert points[0].tags["ipc.endpoint"] == "/v1/items"
        assert points[0].tags["http.method"] == "GET"
        assert points[0].tags["http.status"] == "200"
        assert points[0].tags["ipc.result"] == "success"
        assert "ipc.attempt" not in points[0].tags

    @pytest.mark.asyncio
    async def test_error_status(self, trace_config, memory_backend):
        """Error responses are recorded as failures."""
        ctx = SimpleNamespace(trace_request_ctx=None)

        await trace_config.on_request_start[0](Mock(), ctx, _start_params(method="POST"))
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(429, method="POST"))

        point = memory_backend.find(IPC_CLIENT_CALL)[0]
        assert point.tags["ipc.result"] == "failure"
        assert point.tags["ipc.status"] == "throttled"

    @pytest.mark.asyncio
    async def test_exception(self, trace_config, memory_backend):
        """Transport exceptions are classified."""
        ctx = SimpleNamespace(trace_request_ctx=None)

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        await trace_config.on_request_exception[0](
            Mock(), ctx, _exception_params(aiohttp.ClientConnectionError("refused"))
        )

        point = memory_backend.find(IPC_CLIENT_CALL)[0]
        assert point.tags["ipc.status"] == "connection_error"
        assert point.tags["http.status"] == "-1"

    @pytest.mark.asyncio
    async def test_attempt_metadata(self, trace_config, memory_backend):
        """Attempt metadata comes from trace_request_ctx."""
        ctx = SimpleNamespace(trace_request_ctx={"attempt": 2, "final": True})

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))

        point = memory_backend.find(IPC_CLIENT_CALL)[0]
        assert point.tags["ipc.attempt"] == "third_up"
        assert point.tags["ipc.attempt.final"] == "true"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("final, expected", [
        ("false", "false"),
        ("TRUE", "true"),
        ("yes", "false"),
        (1, "false"),
        (True, "true"),
    ])
    async def test_final_flag_values(self, trace_config, memory_backend, final, expected):
        """Only True or the string "true" mark the final attempt."""
        ctx = SimpleNamespace(trace_request_ctx={"attempt": 0, "final": final})

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))

        point = memory_backend.find(IPC_CLIENT_CALL)[0]
        assert point.tags["ipc.attempt.final"] == expected

    @pytest.mark.asyncio
    async def test_invalid_attempt_ignored(self, trace_config, memory_backend):
        """Unusable attempt values are skipped rather than failing the request."""
        ctx = SimpleNamespace(trace_request_ctx={"attempt": "first"})

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))

        point = memory_backend.find(IPC_CLIENT_CALL)[0]
        assert "ipc.attempt" not in point.tags

    @pytest.mark.asyncio
    async def test_end_without_start_is_ignored(self, trace_config, memory_backend):
        """Hooks without a started measurement record nothing."""
        ctx = SimpleNamespace(trace_request_ctx=None)

        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))
        await trace_config.on_request_exception[0](Mock(), ctx, _exception_params(ValueError()))

        assert memory_backend.find(IPC_CLIENT_CALL) == []

    @pytest.mark.asyncio
    async def test_global_registry_resolved_per_request(self):
        """Without a registry the global one at request time is used."""
        trace_config = create_trace_config()
        backend = MemoryMetricsBackend()
        configure_registry(Registry(RegistryConfig(backends=[backend])))
        ctx = SimpleNamespace(trace_request_ctx=None)

        await trace_config.on_request_start[0](Mock(), ctx, _start_params())
        await trace_config.on_request_end[0](Mock(), ctx, _end_params(200))

        assert len(backend.find(IPC_CLIENT_CALL)) == 1


class TestClientSessionIntegration:
    """Test the trace config on a real ClientSession."""

    @pytest.mark.asyncio
    async def test_requests_are_measured(self, registry, memory_backend):
        """Requests through a traced session are recorded per attempt."""
        async def items(request):
            return web.json_response({"items": []})

        async def broken(request):
            return web.Response(status=500)

        app = web.Application()
        app.router.add_get("/v1/items", items)
        app.router.add_post("/v1/broken", broken)

        async with test_utils.TestServer(app) as server:
            trace_configs = [create_trace_config(registry)]
            async with aiohttp.ClientSession(trace_configs=trace_configs) as session:
                async with session.get(server.make_url("/v1/items?page=3")) as response:
                    await response.read()
                for attempt in range(2):
                    ctx = {"attempt": attempt, "final": attempt == 1}
                    async with session.post(server.make_url("/v1/broken"), trace_request_ctx=ctx) as response:
                        await response.read()

        ok = memory_backend.find(IPC_CLIENT_CALL, **{"ipc.endpoint": "/v1/items"})
        assert len(ok) == 1
        assert ok[0].tags["http.status"] == "200"
        assert ok[0].tags["ipc.result"] == "success"

        failed = memory_backend.find(IPC_CLIENT_CALL, **{"ipc.endpoint": "/v1/broken"})
        assert [p.tags["ipc.attempt"] for p in failed] == ["initial", "second"]
        assert [p.tags["ipc.attempt.final"] for p in failed] == ["false", "true"]
        assert all(p.tags["ipc.status"] == "unexpected_error" for p in failed)

    @pytest.mark.asyncio
    async def test_redirect_recorded_once_under_first_endpoint(self, registry, memory_backend):
        """A followed redirect is one call: first hop's endpoint, last hop's status."""
        async def start(request):
            raise web.HTTPFound("/v1/final")

        async def final(request):
            return web.Response(text="done")

        app = web.Application()
        app.router.add_get("/v1/start", start)
        app.router.add_get("/v1/final", final)

        async with test_utils.TestServer(app) as server:
            async with aiohttp.ClientSession(trace_configs=[create_trace_config(registry)]) as session:
                async with session.get(server.make_url("/v1/start")) as response:
                    await response.read()

        points = memory_backend.find(IPC_CLIENT_CALL)
        assert [(p.tags["ipc.endpoint"], p.tags["http.status"]) for p in points] == [("/v1/start", "200")]
