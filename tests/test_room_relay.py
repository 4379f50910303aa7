import pytest

from domain.realtime.rooms import user_room_name
from domain.user.entity import UserIdentity

TS = "2024-01-01T00:00:00.000Z"


async def _connect(transport, relay, sid, username, user_id=1):
    transport.connect(sid)
    await relay.on_connect(sid, UserIdentity(id=user_id, username=username, email=f"{username}@example.com"))


def test_user_room_name():
    assert user_room_name(2) == "user-2"
    assert user_room_name("7") == "user-7"


@pytest.mark.asyncio
async def test_join_notifies_other_members_only(transport, relay):
    await _connect(transport, relay, "b", "bob")
    await relay.join_room("b", "lobby")
    await _connect(transport, relay, "a", "alice")

    await relay.join_room("a", "lobby")

    assert transport.received("b", "user-joined") == [
        ("user-joined", {"username": "alice", "message": "alice joined the room"})
    ]
    assert transport.received("a") == []
    assert "a" in transport.rooms["lobby"]


@pytest.mark.asyncio
async def test_join_does_not_reach_other_rooms(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "c", "carol")
    await relay.join_room("c", "kitchen")

    await relay.join_room("a", "lobby")

    assert transport.received("c") == []


@pytest.mark.asyncio
async def test_leave_notifies_remaining_members(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "b", "bob")
    await relay.join_room("a", "lobby")
    await relay.join_room("b", "lobby")
    transport.deliveries.clear()

    await relay.leave_room("a", "lobby")

    assert transport.received("b") == [("user-left", {"username": "alice", "message": "alice left the room"})]
    assert transport.received("a") == []
    assert "a" not in transport.rooms["lobby"]


@pytest.mark.asyncio
async def test_leaving_unjoined_room_is_harmless(transport, relay):
    await _connect(transport, relay, "a", "alice")

    await relay.leave_room("a", "nowhere")

    assert transport.deliveries == []


@pytest.mark.asyncio
async def test_message_reaches_everyone_including_sender(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "b", "bob")
    await relay.join_room("b", "kitchen")
    transport.deliveries.clear()

    await relay.broadcast_message("a", {"message": "hi"})

    expected = ("message", {"username": "alice", "userId": 1, "message": "hi", "timestamp": TS})
    assert transport.received("a") == [expected]
    assert transport.received("b") == [expected]


@pytest.mark.asyncio
async def test_malformed_message_passes_through_as_none(transport, relay):
    await _connect(transport, relay, "a", "alice")

    await relay.broadcast_message("a", {"text": "wrong field"})
    await relay.broadcast_message("a", "not an object")
    await relay.broadcast_message("a")

    payloads = [data for _, data in transport.received("a", "message")]
    assert [p["message"] for p in payloads] == [None, None, None]


@pytest.mark.asyncio
async def test_private_message_only_reaches_target_room(transport, relay):
    await _connect(transport, relay, "a", "alice", user_id=1)
    await _connect(transport, relay, "b", "bob", user_id=2)
    await _connect(transport, relay, "c", "carol", user_id=1)
    await relay.join_room("a", "user-2")
    transport.deliveries.clear()

    await relay.private_message("b", {"targetUserId": 2, "message": "secret"})

    assert transport.received("a") == [
        ("private-message", {"from": "bob", "fromId": 2, "message": "secret", "timestamp": TS})
    ]
    assert transport.received("b") == []
    assert transport.received("c") == []


@pytest.mark.asyncio
async def test_private_message_is_not_auto_delivered(transport, relay):
    # The target never joined its own user room, so nothing is delivered.
    await _connect(transport, relay, "a", "alice", user_id=1)
    await _connect(transport, relay, "b", "bob", user_id=2)

    await relay.private_message("a", {"targetUserId": 2, "message": "hello?"})

    assert transport.deliveries == []


@pytest.mark.asyncio
async def test_disconnect_emits_nothing(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "b", "bob")
    await relay.join_room("a", "lobby")
    await relay.join_room("b", "lobby")
    transport.deliveries.clear()

    await relay.on_disconnect("a", "client disconnect")
    transport.disconnect("a")

    assert transport.deliveries == []
    assert transport.rooms["lobby"] == {"b"}


@pytest.mark.asyncio
async def test_disconnect_of_unknown_sid_does_not_raise(relay):
    await relay.on_disconnect("ghost")


@pytest.mark.asyncio
async def test_join_without_room_is_ignored(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "b", "bob")

    await relay.join_room("a")

    assert transport.deliveries == []
    assert all("a" not in members for members in transport.rooms.values())


@pytest.mark.asyncio
async def test_membership_spans_multiple_rooms(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await relay.join_room("a", "lobby")
    await relay.join_room("a", "kitchen")

    assert "a" in transport.rooms["lobby"]
    assert "a" in transport.rooms["kitchen"]


@pytest.mark.asyncio
async def test_leave_without_room_is_ignored(transport, relay):
    await _connect(transport, relay, "a", "alice")
    await _connect(transport, relay, "b", "bob")
    await relay.join_room("a", "lobby")
    await relay.join_room("b", "lobby")
    transport.deliveries.clear()

    await relay.leave_room("a")

    assert transport.deliveries == []
    assert transport.rooms["lobby"] == {"a", "b"}


@pytest.mark.asyncio
async def test_missing_room_is_ignored_with_logging_configured(transport, relay):
    from core.logging_config import configure_logging

    configure_logging(debug=False)
    await _connect(transport, relay, "a", "alice")

    await relay.join_room("a")
    await relay.leave_room("a")

    assert transport.deliveries == []
