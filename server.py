"""
server.py — Start/stop the Setlist API as explicit, independent instances.

``run_server`` returns a ``ServerHandle``; pass it to ``close_server``.
Running this file directly serves in the foreground until Ctrl+C.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from pymongo import MongoClient

from config import settings
from database.connection import MongoGateway
from main import create_app

logger = logging.getLogger("server")

STARTUP_TIMEOUT = 10.0


@dataclass
class ServerHandle:
    app: FastAPI
    server: uvicorn.Server
    thread: threading.Thread
    gateway: MongoGateway
    host: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def _bound_port(server: uvicorn.Server, fallback: int) -> int:
    for srv in getattr(server, "servers", []):
        for sock in srv.sockets:
            return sock.getsockname()[1]
    return fallback


def run_server(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    host: Optional[str] = None,
    client_factory: Callable[..., MongoClient] = MongoClient,
) -> ServerHandle:
    """Connects to the store, then serves on a background thread. ``port=0`` picks a free port."""
    host = host or settings.HOST
    port = settings.PORT if port is None else port

    gateway = MongoGateway(database_url, client_factory=client_factory)
    app = create_app(gateway)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level=settings.LOG_LEVEL.lower()))
    thread = threading.Thread(target=server.run, name=f"setlist-server-{port}", daemon=True)
    thread.start()

    deadline = time.monotonic() + STARTUP_TIMEOUT
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            thread.join(timeout=STARTUP_TIMEOUT)
            raise RuntimeError(f"Server failed to start on {host}:{port}")
        time.sleep(0.01)

    handle = ServerHandle(app, server, thread, gateway, host, _bound_port(server, port))
    logger.info(f"🚀 Listening on {handle.base_url}")
    return handle


def close_server(handle: ServerHandle, timeout: float = STARTUP_TIMEOUT) -> None:
    """Stops the server; its lifespan closes the database connection."""
    logger.info(f"🛑 Closing server on {handle.base_url}")
    handle.server.should_exit = True
    handle.thread.join(timeout=timeout)
    if handle.thread.is_alive():
        raise RuntimeError(f"Server on {handle.base_url} did not stop within {timeout}s")


def main():
    handle = run_server()
    try:
        while handle.thread.is_alive():
            handle.thread.join(timeout=0.5)
    except KeyboardInterrupt:
        print("\n🛑 Stopping server...")
    finally:
        close_server(handle)


if __name__ == "__main__":
    main()
