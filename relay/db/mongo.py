# relay/db/mongo.py

from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from relay.core.config import Settings
from relay.core.exceptions import StorageError
from relay.models.message import Message, utcnow


def create_client(settings: Settings) -> AsyncIOMotorClient:
    # Motor connects lazily; nothing touches the network until the first call.
    return AsyncIOMotorClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        tz_aware=True,
    )


def to_object_id(message_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(message_id)
    except (InvalidId, TypeError):
        return None


class MongoMessageStore:
    def __init__(self, collection: AsyncIOMotorCollection, client: Optional[AsyncIOMotorClient] = None):
        self.collection = collection
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoMessageStore":
        client = create_client(settings)
        db = client[settings.MONGODB_DB]
        return cls(db.get_collection(settings.MONGODB_COLLECTION), client=client)

    async def ping(self) -> None:
        """Raise if the server cannot be reached within the selection timeout."""
        client = self.client or self.collection.database.client
        await client.server_info()

    async def list(self) -> List[Message]:
        try:
            docs = await self.collection.find().sort("timestamp", ASCENDING).to_list(length=None)
        except PyMongoError as e:
            raise StorageError("Failed to fetch messages") from e
        return [Message.from_document(doc) for doc in docs]

    async def create(self, message: Message) -> Message:
        doc = message.to_document()
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            raise StorageError("Failed to create message") from e
        return message.model_copy(update={"id": str(result.inserted_id)})

    async def update(self, message_id: str, content: str) -> bool:
        oid = to_object_id(message_id)
        if oid is None:
            return False
        try:
            result = await self.collection.update_one(
                {"_id": oid},
                {"$set": {"content": content, "updatedAt": utcnow()}},
            )
        except PyMongoError as e:
            raise StorageError("Failed to update message") from e
        return result.matched_count > 0

    async def delete(self, message_id: str) -> bool:
        oid = to_object_id(message_id)
        if oid is None:
            return False
        try:
            result = await self.collection.delete_one({"_id": oid})
        except PyMongoError as e:
            raise StorageError("Failed to delete message") from e
        return result.deleted_count > 0

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
