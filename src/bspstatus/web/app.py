"""FastAPI 应用初始化"""

import asyncio

import uvicorn

from bspstatus import config
from bspstatus.client import AsyncStatusSource
from bspstatus.errors import StartupError
from bspstatus.telemetry import get_logger, setup_logging
from bspstatus.web.server import WebServer

logger = get_logger(__name__)


def create_app() -> WebServer:
    """创建 Web 应用"""
    return WebServer()


async def pump_status(server: WebServer, source: AsyncStatusSource) -> None:
    """Feed snapshots from bspc into the web server until the stream ends."""
    async for snapshot in source.snapshots():
        await server.update(snapshot)
    logger.warning(f"[StatusPump] bspc stream ended (returncode={source.returncode})")


async def start_server(host: str = config.WEB_HOST, port: int = config.WEB_PORT) -> None:
    """启动服务器"""
    server = create_app()
    source = AsyncStatusSource()
    await source.start()

    pump_task = asyncio.create_task(pump_status(server, source))

    uvicorn_config = uvicorn.Config(server.app, host=host, port=port, log_level="info")
    uvicorn_server = uvicorn.Server(uvicorn_config)

    logger.info(f"[WebServer] bspstatus starting at http://{host}:{port}")

    try:
        await uvicorn_server.serve()
    finally:
        await stop_pump(pump_task, source)


async def stop_pump(pump_task: asyncio.Task, source: AsyncStatusSource) -> None:
    """Cancel the pump, collect its outcome, then stop bspc."""
    pump_task.cancel()
    results = await asyncio.gather(pump_task, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            logger.error(f"[StatusPump] pump failed: {result!r}")
    await source.close()


def main():
    """入口函数"""
    setup_logging()
    try:
        asyncio.run(start_server())
    except StartupError as e:
        logger.error(f"[WebServer] {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        print("\nServer stopped")
