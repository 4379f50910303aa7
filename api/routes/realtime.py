"""Socket.IO event routes for the realtime relay.

The handshake is checked once, in `connect`; a token that expires later
does not close an already admitted connection.
"""
from __future__ import annotations

from typing import Any, Optional

import socketio
from socketio.exceptions import ConnectionRefusedError as SioConnectionRefusedError

from application.services.realtime_service import RoomRelay
from application.services.token_service import TokenService
from domain.common.exceptions import InvalidTokenException, MissingTokenException
from domain.realtime.rooms import JOIN_ROOM, LEAVE_ROOM, MESSAGE, PRIVATE_MESSAGE
from domain.user.entity import UserIdentity
from core.logging_config import get_logger


logger = get_logger(__name__)


def _extract_token(environ: dict, auth: Any) -> Optional[str]:
    # Prefer the handshake auth payload, fallback to header `Authorization: Bearer x`
    if isinstance(auth, dict):
        token = auth.get("token")
        if token:
            return str(token)
    header = environ.get("HTTP_AUTHORIZATION") or ""
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def authenticate_handshake(token_service: TokenService, environ: dict, auth: Any) -> UserIdentity:
    """Resolve the identity of a connection attempt.

    Raises:
        MissingTokenException: neither auth field nor bearer header carries a token
        InvalidTokenException: signature, payload or expiry check failed
    """
    token = _extract_token(environ, auth)
    if not token:
        raise MissingTokenException()
    return token_service.verify_access_token(token)


def register_realtime_handlers(sio: socketio.AsyncServer, relay: RoomRelay, token_service: TokenService) -> None:
    """Bind relay use-cases to Socket.IO events on the default namespace."""

    @sio.on("connect")
    async def connect(sid: str, environ: dict, auth: Any = None) -> None:
        try:
            identity = authenticate_handshake(token_service, environ, auth)
        except (MissingTokenException, InvalidTokenException) as exc:
            logger.warning("realtime_auth_rejected", sid=sid, error_type=exc.error_type, details=exc.details)
            raise SioConnectionRefusedError(exc.message)
        await relay.on_connect(sid, identity)

    sio.on("disconnect", relay.on_disconnect)
    sio.on(JOIN_ROOM, relay.join_room)
    sio.on(LEAVE_ROOM, relay.leave_room)
    sio.on(MESSAGE, relay.broadcast_message)
    sio.on(PRIVATE_MESSAGE, relay.private_message)
