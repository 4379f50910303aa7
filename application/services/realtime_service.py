"""Application service for realtime relay workflows.

Room membership, fan-out and per-connection sessions all live in the
realtime library; this service only decides who hears what. Every
handler runs to completion on the event loop: no queues, retries or
delivery confirmation.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from application.ports.realtime import (
    ChatMessage,
    PresenceEvent,
    PrivateMessage,
    RealtimeTransportPort,
    utc_now_iso,
)
from domain.realtime.rooms import MESSAGE, PRIVATE_MESSAGE, USER_JOINED, USER_LEFT, user_room_name
from domain.user.entity import UserIdentity
from core.logging_config import get_logger


logger = get_logger(__name__)

SESSION_USER_KEY = "user"


def _field(data: Any, key: str) -> Any:
    # Payloads are not validated; anything that isn't an object yields None.
    if isinstance(data, dict):
        return data.get(key)
    return None


class RoomRelay:
    def __init__(self, *, transport: RealtimeTransportPort, clock: Callable[[], str] = utc_now_iso) -> None:
        self._transport = transport
        self._clock = clock

    # Connection lifecycle
    async def on_connect(self, sid: str, identity: UserIdentity) -> None:
        """Bind the authenticated identity to the connection for its lifetime."""
        await self._transport.save_session(sid, {SESSION_USER_KEY: identity})
        logger.info("realtime_connected", sid=sid, username=identity.username, user_id=identity.id)

    async def on_disconnect(self, sid: str, reason: Optional[str] = None) -> None:
        """Log only.

        The library drops every room membership of the sid; former room
        peers are not notified.
        """
        try:
            identity = await self.identity(sid)
        except KeyError:
            identity = None
        logger.info(
            "realtime_disconnected",
            sid=sid,
            username=identity.username if identity else None,
            reason=reason,
        )

    async def identity(self, sid: str) -> UserIdentity:
        session = await self._transport.get_session(sid)
        return session[SESSION_USER_KEY]

    # Client events
    async def join_room(self, sid: str, room: Any = None) -> None:
        if room is None:
            logger.warning("realtime_room_missing", sid=sid, client_event="join-room")
            return
        room = str(room)
        user = await self.identity(sid)
        await self._transport.enter_room(sid, room)
        logger.info("realtime_room_joined", sid=sid, username=user.username, room=room)
        event = PresenceEvent(username=user.username, message=f"{user.username} joined the room")
        await self._transport.emit(USER_JOINED, event.model_dump(), to=room, skip_sid=sid)

    async def leave_room(self, sid: str, room: Any = None) -> None:
        if room is None:
            logger.warning("realtime_room_missing", sid=sid, client_event="leave-room")
            return
        room = str(room)
        user = await self.identity(sid)
        # Leave first so the notification only reaches the remaining members.
        await self._transport.leave_room(sid, room)
        logger.info("realtime_room_left", sid=sid, username=user.username, room=room)
        event = PresenceEvent(username=user.username, message=f"{user.username} left the room")
        await self._transport.emit(USER_LEFT, event.model_dump(), to=room, skip_sid=sid)

    async def broadcast_message(self, sid: str, data: Any = None) -> None:
        """Send to every connection in the process, sender included."""
        user = await self.identity(sid)
        logger.info("realtime_message", sid=sid, username=user.username, data=data)
        msg = ChatMessage(
            username=user.username,
            user_id=user.id,
            message=_field(data, "message"),
            timestamp=self._clock(),
        )
        await self._transport.emit(MESSAGE, msg.model_dump(by_alias=True))

    async def private_message(self, sid: str, data: Any = None) -> None:
        """Best-effort delivery to whoever joined `user-<targetUserId>`.

        Nobody in that room means the message is dropped silently.
        """
        user = await self.identity(sid)
        room = user_room_name(_field(data, "targetUserId"))
        logger.info("realtime_private_message", sid=sid, username=user.username, room=room)
        msg = PrivateMessage(
            from_username=user.username,
            from_id=user.id,
            message=_field(data, "message"),
            timestamp=self._clock(),
        )
        await self._transport.emit(PRIVATE_MESSAGE, msg.model_dump(by_alias=True), to=room, skip_sid=sid)
