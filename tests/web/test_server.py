"""Tests for the web view."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from bspstatus.errors import ReadError
from bspstatus.parser import parse_line
from bspstatus.telemetry import metrics
from bspstatus.web import WebServer, create_app
from bspstatus.web.app import pump_status, stop_pump


@pytest.fixture
def server() -> WebServer:
    return create_app()


class TestHttpRoutes:
    """Tests for the HTTP API."""

    def test_status_before_first_snapshot(self, server):
        """No snapshot yet -> 404."""
        client = TestClient(server.app)
        assert client.get("/api/status").status_code == 404

    def test_status(self, server):
        """Latest snapshot is returned as a dict."""
        server.latest = parse_line("WM1:O1:f2:LT")
        client = TestClient(server.app)

        response = client.get("/api/status")

        assert response.status_code == 200
        data = response.json()
        assert data["monitors"][0]["name"] == "1"
        assert data["monitors"][0]["layout"] == "tiling"
        assert data["monitors"][0]["desktops"][0]["focused"] is True

    def test_get_monitor(self, server):
        """Monitor lookup by name."""
        server.latest = parse_line("WmHDMI:oI:MDP:FII:LM")
        client = TestClient(server.app)

        response = client.get("/api/monitors/DP")
        assert response.status_code == 200
        assert response.json()["layout"] == "monocle"

        assert client.get("/api/monitors/VGA").status_code == 404


class TestWebSocket:
    """Tests for the /ws endpoint."""

    def test_sends_latest_on_connect(self, server):
        """A new client receives the current snapshot."""
        server.latest = parse_line("WM1:o1")
        client = TestClient(server.app)

        with client.websocket_connect("/ws") as websocket:
            data = websocket.receive_json()

        assert data["type"] == "status"
        assert data["monitors"][0]["desktops"][0]["name"] == "1"

    @pytest.mark.asyncio
    async def test_update_broadcasts(self, server):
        """update() stores the snapshot and sends it to every client."""
        good = MagicMock()
        good.send_json = AsyncMock()
        bad = MagicMock()
        bad.send_json = AsyncMock(side_effect=RuntimeError("closed"))
        server.clients = [good, bad]

        snapshot = parse_line("WM1:U2")
        await server.update(snapshot)

        assert server.latest is snapshot
        sent = good.send_json.call_args[0][0]
        assert sent["type"] == "status"
        assert sent["monitors"][0]["desktops"][0]["urgent"] is True
        assert server.clients == [good]
        assert metrics.get_gauge("web.clients") == 1


class TestPumpStatus:
    """Tests for pump_status."""

    @pytest.mark.asyncio
    async def test_pumps_until_end(self, server):
        """Every snapshot from the source reaches the server."""
        snapshots = [parse_line("WM1"), parse_line("WM2")]

        async def fake_snapshots():
            for snapshot in snapshots:
                yield snapshot

        source = MagicMock()
        source.snapshots = fake_snapshots
        source.returncode = 0
        server.update = AsyncMock()

        await pump_status(server, source)

        assert server.update.await_count == 2
        assert server.update.await_args[0][0] is snapshots[1]


class TestClientCleanup:
    """Tests for websocket client bookkeeping."""

    @pytest.mark.asyncio
    async def test_receive_error_removes_client(self, server):
        """A client is dropped even when receive fails with a non-disconnect error."""
        endpoint = next(route for route in server.app.routes if route.path == "/ws").endpoint
        websocket = MagicMock()
        websocket.accept = AsyncMock()
        websocket.send_json = AsyncMock()
        websocket.receive_text = AsyncMock(side_effect=RuntimeError("connection reset"))

        with pytest.raises(RuntimeError):
            await endpoint(websocket)

        assert server.clients == []
        assert metrics.get_gauge("web.clients") == 0


class TestStopPump:
    """Tests for stop_pump."""

    @pytest.mark.asyncio
    async def test_cancels_running_pump(self):
        """A running pump is cancelled and bspc is stopped."""
        source = MagicMock()
        source.close = AsyncMock()
        pump_task = asyncio.create_task(asyncio.sleep(60))

        await stop_pump(pump_task, source)

        assert pump_task.cancelled()
        source.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_collects_pump_failure(self, caplog):
        """An exception raised by the pump is collected and logged."""
        source = MagicMock()
        source.close = AsyncMock()

        async def failing_pump():
            raise ReadError("broken pipe")

        pump_task = asyncio.create_task(failing_pump())
        await asyncio.sleep(0)

        with caplog.at_level(logging.ERROR, logger="bspstatus.web.app"):
            await stop_pump(pump_task, source)

        assert "broken pipe" in caplog.text
        source.close.assert_awaited_once()
