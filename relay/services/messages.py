# relay/services/messages.py

from typing import List, Optional

from relay.core.exceptions import MessageNotFoundError, MessageValidationError
from relay.db.store import MessageStore
from relay.models.message import DEFAULT_CONVERSATION_ID, Message, utcnow
from relay.realtime.broadcaster import (
    MESSAGE_DELETED,
    MESSAGE_UPDATED,
    NEW_MESSAGE,
    Broadcaster,
)
from relay.utils.locks import KeyedLock


class MessageService:
    """
    Message operations shared by the REST routes and the push channel.

    Every successful write is broadcast exactly once. Writes to the same id
    hold a per-id lock across the storage call and its broadcast, so the
    last write to resolve is also the last event clients see for that id.
    """

    def __init__(self, store: MessageStore, broadcaster: Broadcaster):
        self.store = store
        self.broadcaster = broadcaster
        self._locks = KeyedLock()

    async def list(self) -> List[Message]:
        return await self.store.list()

    async def create(
        self,
        sender_id: Optional[str],
        content: Optional[str],
        conversation_id: Optional[str] = None,
    ) -> Message:
        if not sender_id or not content:
            raise MessageValidationError("senderId and content are required")

        now = utcnow()
        message = Message(
            id="",
            sender_id=sender_id,
            content=content,
            conversation_id=conversation_id or DEFAULT_CONVERSATION_ID,
            timestamp=now,
            created_at=now,
        )
        saved = await self.store.create(message)
        await self.broadcaster.broadcast(NEW_MESSAGE, saved.to_wire())
        return saved

    async def update(self, message_id: Optional[str], content: Optional[str]) -> None:
        if not message_id or not content:
            raise MessageValidationError("id and content are required")

        async with self._locks.hold(message_id):
            if not await self.store.update(message_id, content):
                raise MessageNotFoundError("Message not found")
            await self.broadcaster.broadcast(MESSAGE_UPDATED, {"id": message_id, "content": content})

    async def delete(self, message_id: Optional[str]) -> None:
        if not message_id:
            raise MessageValidationError("id is required")

        async with self._locks.hold(message_id):
            if not await self.store.delete(message_id):
                raise MessageNotFoundError("Message not found")
            await self.broadcaster.broadcast(MESSAGE_DELETED, {"id": message_id})
