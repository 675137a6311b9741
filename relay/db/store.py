# relay/db/store.py

import asyncio
from enum import Enum
from typing import List, Optional

from relay.core.logger import logger
from relay.db.memory import MemoryMessageStore
from relay.db.mongo import MongoMessageStore
from relay.models.message import Message


class StorageBackend(str, Enum):
    PENDING = "pending"
    DURABLE = "durable"
    FALLBACK = "fallback"


class MessageStore:
    """
    Routes message operations to MongoDB or to the in-process fallback.

    The backend is chosen once by ``connect()``. Until then the store is
    PENDING and serves the fallback list. A failed connection switches to
    FALLBACK for the rest of the process; there is no reconnection.
    """

    def __init__(
        self,
        durable: Optional[MongoMessageStore] = None,
        fallback: Optional[MemoryMessageStore] = None,
    ):
        self.durable = durable
        self.fallback = fallback or MemoryMessageStore()
        self.backend = StorageBackend.PENDING
        self._ready: Optional[asyncio.Future] = None

    @property
    def active(self):
        if self.backend is StorageBackend.DURABLE:
            return self.durable
        return self.fallback

    async def connect(self) -> StorageBackend:
        if self.backend is not StorageBackend.PENDING:
            return self.backend

        if self.durable is None:
            logger.info("No durable storage configured, using in-memory storage")
            self.backend = StorageBackend.FALLBACK
            return self.backend

        try:
            await self.durable.ping()
        except Exception as e:
            logger.error(f"MongoDB connection error: {e}")
            logger.warning("Using in-memory storage as fallback")
            self.backend = StorageBackend.FALLBACK
        else:
            logger.info("Connected to MongoDB")
            self.backend = StorageBackend.DURABLE
        return self.backend

    def start(self) -> asyncio.Future:
        """Schedule the connection attempt and return it as the readiness future."""
        if self._ready is None:
            self._ready = asyncio.ensure_future(self.connect())
        return self._ready

    async def wait_ready(self) -> StorageBackend:
        return await self.start()

    async def list(self) -> List[Message]:
        return await self.active.list()

    async def create(self, message: Message) -> Message:
        return await self.active.create(message)

    async def update(self, message_id: str, content: str) -> bool:
        return await self.active.update(message_id, content)

    async def delete(self, message_id: str) -> bool:
        return await self.active.delete(message_id)

    def close(self) -> None:
        if self.durable is not None:
            self.durable.close()
