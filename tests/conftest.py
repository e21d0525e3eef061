"""Shared test fixtures for the loadprobe test suite."""

from __future__ import annotations

import asyncio
import socket
import threading
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

from loadprobe._internal.logging import reset_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


@pytest.fixture(autouse=True)
def _reset_loadprobe_logger() -> Iterator[None]:
    """Drop handlers bound to streams that only lived for one test."""
    yield
    reset_logging()


# =============================================================================
# Network utilities
# =============================================================================


def _get_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@pytest.fixture
def refused_url() -> str:
    """URL on a port nothing listens on."""
    return f"http://127.0.0.1:{_get_free_port()}/"


# =============================================================================
# Target HTTP server handlers
# =============================================================================


async def _ok_handler(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def _status_handler(request: web.Request) -> web.Response:
    """Respond with the status code given in the path: /status/404."""
    return web.Response(status=int(request.match_info["code"]), text="status")


async def _delay_handler(request: web.Request) -> web.Response:
    """Respond after a configurable delay (query param: ?delay=0.5)."""
    delay = float(request.query.get("delay", "0.1"))
    await asyncio.sleep(delay)
    return web.Response(text="delayed")


async def _redirect_handler(request: web.Request) -> web.Response:
    raise web.HTTPFound("/ok")


async def _large_handler(request: web.Request) -> web.Response:
    """Return a 1 MiB body that clients are not expected to read."""
    return web.Response(body=b"x" * (1024 * 1024))


def _create_target_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/ok", _ok_handler)
    app.router.add_get("/status/{code:\\d+}", _status_handler)
    app.router.add_get("/delay", _delay_handler)
    app.router.add_get("/redirect", _redirect_handler)
    app.router.add_get("/large", _large_handler)
    return app


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
async def http_server() -> AsyncIterator[str]:
    """Target server on the test's event loop.

    Returns the base URL (e.g., 'http://127.0.0.1:54321').
    """
    runner = web.AppRunner(_create_target_app())
    await runner.setup()
    port = _get_free_port()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    yield f"http://127.0.0.1:{port}"
    await runner.cleanup()


@pytest.fixture
def sync_http_server() -> Iterator[str]:
    """Target server running in a background thread.

    Needed wherever the code under test calls ``asyncio.run`` itself and
    therefore blocks the main thread (``LoadTestRunner.run`` and the CLI).
    """
    port = _get_free_port()
    started = threading.Event()
    loop_holder: list[asyncio.AbstractEventLoop] = []

    def _thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        runner = web.AppRunner(_create_target_app())
        loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", port)
        loop.run_until_complete(site.start())
        loop_holder.append(loop)
        started.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_thread_target, daemon=True)
    thread.start()
    started.wait(timeout=5.0)

    yield f"http://127.0.0.1:{port}"

    if loop_holder:
        loop_holder[0].call_soon_threadsafe(loop_holder[0].stop)
    thread.join(timeout=5.0)
