"""Socket.IO server factory.

One AsyncServer per application instance. Its in-process manager is the
connection registry (sids, sessions, rooms); nothing here re-implements it.
"""
from __future__ import annotations

import socketio

from core.config import Settings


def create_socketio_server(settings: Settings) -> socketio.AsyncServer:
    origins = settings.CORS_ORIGINS
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if "*" in origins else origins,
        ping_interval=settings.SIO_PING_INTERVAL,
        ping_timeout=settings.SIO_PING_TIMEOUT,
        logger=False,
        engineio_logger=False,
    )


def create_socketio_asgi_app(sio: socketio.AsyncServer, other_app, settings: Settings) -> socketio.ASGIApp:
    """Serve Socket.IO on `settings.SIO_PATH`, everything else goes to the HTTP app."""
    return socketio.ASGIApp(sio, other_asgi_app=other_app, socketio_path=settings.SIO_PATH)
