"""
Realtime port and outbound payload DTOs (contracts-first).

The application layer talks to the realtime library only through
RealtimeTransportPort. `socketio.AsyncServer` satisfies it as-is: its
manager is the registry of live sids, their sessions and room
memberships.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def utc_now_iso() -> str:
    """UTC ISO8601 with millisecond precision and a Z suffix."""
    ts = datetime.now(timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class PresenceEvent(BaseModel):
    """Payload of `user-joined` / `user-left`."""

    username: str
    message: str


class ChatMessage(BaseModel):
    """Payload of the process-wide `message` broadcast.

    `message` is passed through unvalidated; a missing field stays None.
    """

    username: str
    user_id: int = Field(serialization_alias="userId")
    message: Any = None
    timestamp: str = Field(default_factory=utc_now_iso)


class PrivateMessage(BaseModel):
    """Payload of `private-message`."""

    from_username: str = Field(serialization_alias="from")
    from_id: int = Field(serialization_alias="fromId")
    message: Any = None
    timestamp: str = Field(default_factory=utc_now_iso)


class RealtimeTransportPort(Protocol):
    """Subset of the python-socketio server API the relay depends on."""

    async def enter_room(self, sid: str, room: str, namespace: Optional[str] = None) -> None: ...

    async def leave_room(self, sid: str, room: str, namespace: Optional[str] = None) -> None: ...

    async def emit(
        self,
        event: str,
        data: Any = None,
        to: Optional[str] = None,
        room: Optional[str] = None,
        skip_sid: Optional[str] = None,
        namespace: Optional[str] = None,
    ) -> None: ...

    async def save_session(self, sid: str, session: dict, namespace: Optional[str] = None) -> None: ...

    async def get_session(self, sid: str, namespace: Optional[str] = None) -> dict: ...


__all__ = [
    "utc_now_iso",
    "PresenceEvent",
    "ChatMessage",
    "PrivateMessage",
    "RealtimeTransportPort",
]
