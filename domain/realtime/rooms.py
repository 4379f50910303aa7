"""
实时通道约定：事件名与隐式房间命名
"""

# client -> server
JOIN_ROOM = "join-room"
LEAVE_ROOM = "leave-room"
MESSAGE = "message"
PRIVATE_MESSAGE = "private-message"

# server -> client
USER_JOINED = "user-joined"
USER_LEFT = "user-left"

USER_ROOM_PREFIX = "user-"


def user_room_name(user_id) -> str:
    """Name of the implicit per-user room targeted by private messages.

    Connections are not subscribed to it automatically; the target has to
    `join-room` it like any other room.
    """
    return f"{USER_ROOM_PREFIX}{user_id}"
