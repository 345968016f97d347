"""Web layer: FastAPI application, middleware and server lifecycle."""

from .app_factory import create_app
from .server import Server, ServerConfig, ServerState

__all__ = ["create_app", "Server", "ServerConfig", "ServerState"]
