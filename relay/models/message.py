# relay/models/message.py

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_CONVERSATION_ID = "general"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    id: str
    sender_id: str = Field(..., alias="senderId")
    content: str
    conversation_id: str = Field(default=DEFAULT_CONVERSATION_ID, alias="conversationId")
    timestamp: datetime
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Message":
        """Build a message from a MongoDB document, mapping ``_id`` to ``id``."""
        data = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=str(doc["_id"]), **data)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready camelCase payload; ``updatedAt`` is left out until set."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------
# Request payloads
# ---------------------
# Fields are optional here so that missing values are reported by the
# message service with the same error on REST and on the push channel.

class MessageCreate(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    sender_id: Optional[str] = Field(default=None, alias="senderId")
    content: Optional[str] = None
    conversation_id: Optional[str] = Field(default=None, alias="conversationId")


class MessageUpdate(BaseModel):
    content: Optional[str] = None


class MessageEdit(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "messageId"))
    content: Optional[str] = None


class MessageRemove(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "messageId"))
