# relay/db/memory.py

import uuid
from typing import List

from relay.models.message import Message, utcnow


class MemoryMessageStore:
    """
    In-process message list used when MongoDB is unreachable.
    Contents live only as long as the process.
    """

    def __init__(self):
        self.messages: List[Message] = []

    async def list(self) -> List[Message]:
        ordered = sorted(self.messages, key=lambda m: m.timestamp)
        return [m.model_copy() for m in ordered]

    async def create(self, message: Message) -> Message:
        stored = message.model_copy(update={"id": str(uuid.uuid4())})
        self.messages.append(stored)
        return stored.model_copy()

    async def update(self, message_id: str, content: str) -> bool:
        for index, msg in enumerate(self.messages):
            if msg.id == message_id:
                self.messages[index] = msg.model_copy(
                    update={"content": content, "updated_at": utcnow()}
                )
                return True
        return False

    async def delete(self, message_id: str) -> bool:
        for index, msg in enumerate(self.messages):
            if msg.id == message_id:
                del self.messages[index]
                return True
        return False
