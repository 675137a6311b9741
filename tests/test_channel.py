# tests/test_channel.py

import asyncio

import pytest

from relay.core.exceptions import StorageError
from relay.realtime.broadcaster import Broadcaster
from relay.realtime.channel import MessageChannel
from relay.services.messages import MessageService


@pytest.fixture
def channel(store, sio, emitted):
    broadcaster = Broadcaster(sio)
    channel = MessageChannel(sio, MessageService(store, broadcaster), broadcaster)
    channel.register()
    return channel


def test_handlers_are_registered(channel, sio):
    handlers = sio.handlers["/"]
    assert {"connect", "disconnect", "sendMessage", "updateMessage", "deleteMessage"} <= set(handlers)


def test_connect_schedules_initial_sync(channel, sio, monkeypatch):
    scheduled = []
    monkeypatch.setattr(sio, "start_background_task", lambda fn, *args: scheduled.append((fn, args)))

    asyncio.run(channel.on_connect("sid-1", {}))
    assert scheduled == [(channel.send_existing_messages, ("sid-1",))]


def test_existing_messages_sent_to_connecting_client_only(channel, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"senderId": "u1", "content": "hi"}))
    emitted.clear()

    asyncio.run(channel.send_existing_messages("sid-b"))
    assert len(emitted) == 1
    event, data, to = emitted[0]
    assert (event, to) == ("existingMessages", "sid-b")
    assert [m["content"] for m in data] == ["hi"]


def test_existing_messages_storage_failure(channel, store, emitted, monkeypatch):
    async def broken():
        raise StorageError("boom")

    monkeypatch.setattr(store, "list", broken)
    asyncio.run(channel.send_existing_messages("sid-b"))
    assert emitted == [("error", {"message": "Failed to fetch messages"}, "sid-b")]


def test_send_message_broadcasts_to_everyone(channel, store, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"senderId": "u1", "content": "hi"}))

    assert len(emitted) == 1
    event, data, to = emitted[0]
    assert event == "newMessage" and to is None
    assert data["conversationId"] == "general"
    assert data["id"] == store.fallback.messages[0].id


def test_send_message_missing_fields(channel, store, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"content": "hi"}))
    assert emitted == [("error", {"message": "senderId and content are required"}, "sid-a")]
    assert store.fallback.messages == []


def test_send_message_without_payload(channel, emitted):
    asyncio.run(channel.on_send_message("sid-a"))
    assert emitted == [("error", {"message": "senderId and content are required"}, "sid-a")]


def test_send_message_bad_payload_type(channel, emitted):
    asyncio.run(channel.on_send_message("sid-a", ["not", "an", "object"]))
    assert emitted == [("error", {"message": "Invalid sendMessage payload"}, "sid-a")]


def test_update_message(channel, store, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"senderId": "u1", "content": "hi"}))
    message_id = store.fallback.messages[0].id
    emitted.clear()

    asyncio.run(channel.on_update_message("sid-b", {"id": message_id, "content": "edited"}))
    assert emitted == [("messageUpdated", {"id": message_id, "content": "edited"}, None)]
    assert store.fallback.messages[0].content == "edited"


def test_update_accepts_message_id_alias(channel, store, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"senderId": "u1", "content": "hi"}))
    message_id = store.fallback.messages[0].id
    emitted.clear()

    asyncio.run(channel.on_update_message("sid-a", {"messageId": message_id, "content": "edited"}))
    assert emitted == [("messageUpdated", {"id": message_id, "content": "edited"}, None)]


def test_update_unknown_or_incomplete(channel, emitted):
    asyncio.run(channel.on_update_message("sid-a", {"id": "missing", "content": "x"}))
    asyncio.run(channel.on_update_message("sid-a", {"id": "missing"}))
    assert emitted == [
        ("error", {"message": "Message not found"}, "sid-a"),
        ("error", {"message": "id and content are required"}, "sid-a"),
    ]


def test_delete_message(channel, store, emitted):
    asyncio.run(channel.on_send_message("sid-a", {"senderId": "u1", "content": "hi"}))
    message_id = store.fallback.messages[0].id
    emitted.clear()

    asyncio.run(channel.on_delete_message("sid-a", {"id": message_id}))
    assert emitted == [("messageDeleted", {"id": message_id}, None)]
    assert store.fallback.messages == []


def test_delete_without_id_errors_to_sender_only(channel, emitted):
    asyncio.run(channel.on_delete_message("sid-a", {}))
    assert emitted == [("error", {"message": "id is required"}, "sid-a")]


def test_delete_unknown(channel, emitted):
    asyncio.run(channel.on_delete_message("sid-a", {"id": "missing"}))
    assert emitted == [("error", {"message": "Message not found"}, "sid-a")]


def test_storage_failure_reports_generic_error(channel, store, emitted, monkeypatch):
    async def broken(*args):
        raise StorageError("socket closed")

    monkeypatch.setattr(store, "delete", broken)
    asyncio.run(channel.on_delete_message("sid-a", {"id": "abc"}))
    assert emitted == [("error", {"message": "Failed to delete message"}, "sid-a")]


def test_update_storage_failure_reports_generic_error(channel, store, emitted, monkeypatch):
    async def broken(*args):
        raise StorageError("socket closed")

    monkeypatch.setattr(store, "update", broken)
    asyncio.run(channel.on_update_message("sid-a", {"id": "abc", "content": "x"}))
    assert emitted == [("error", {"message": "Failed to update message"}, "sid-a")]
