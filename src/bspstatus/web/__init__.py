"""Web 服务模块"""

from bspstatus.web.app import create_app
from bspstatus.web.server import WebServer

__all__ = ["create_app", "WebServer"]
