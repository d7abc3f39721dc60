"""Web 服务器"""

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from bspstatus.models import WmRoot
from bspstatus.telemetry import get_logger, metrics

logger = get_logger(__name__)


class WebServer:
    """WebSocket 服务器

    Holds the latest snapshot and pushes every new one to connected clients.
    """

    def __init__(self):
        self.app = FastAPI(title="bspstatus")
        self.clients: list[WebSocket] = []
        self.latest: WmRoot | None = None
        self._setup_routes()

    def _message(self, snapshot: WmRoot) -> dict:
        return {"type": "status", **snapshot.to_dict()}

    async def update(self, snapshot: WmRoot) -> None:
        """记录新快照并广播"""
        self.latest = snapshot
        await self.broadcast(self._message(snapshot))

    def _setup_routes(self):
        @self.app.get("/api/status")
        async def get_status():
            """获取最新快照"""
            if self.latest is None:
                raise HTTPException(status_code=404, detail="No status received yet")
            return self.latest.to_dict()

        @self.app.get("/api/monitors/{name}")
        async def get_monitor(name: str):
            """获取指定 monitor"""
            if self.latest is None:
                raise HTTPException(status_code=404, detail="No status received yet")
            for monitor in self.latest.to_dict()["monitors"]:
                if monitor["name"] == name:
                    return monitor
            raise HTTPException(status_code=404, detail=f"Monitor {name!r} not found")

        @self.app.websocket("/ws")
        async def websocket_endpoint(websocket: WebSocket):
            await websocket.accept()
            self.clients.append(websocket)
            metrics.gauge("web.clients", len(self.clients))
            try:
                if self.latest is not None:
                    await websocket.send_json(self._message(self.latest))
                while True:
                    await websocket.receive_text()
            except WebSocketDisconnect:
                pass
            finally:
                self._remove_client(websocket)

    def _remove_client(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        metrics.gauge("web.clients", len(self.clients))

    async def broadcast(self, data: dict):
        """广播消息给所有客户端"""
        for client in list(self.clients):
            try:
                await client.send_json(data)
            except Exception as e:
                logger.debug(f"[WebServer] dropping client: {e}")
                self._remove_client(client)
