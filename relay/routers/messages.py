# relay/routers/messages.py

from typing import List
from fastapi import APIRouter, Depends

from relay.core.exceptions import MessageNotFoundError, MessageValidationError
from relay.core.logger import logger
from relay.models.message import MessageCreate, MessageUpdate
from relay.routers.deps import get_message_service
from relay.services.messages import MessageService
from relay.utils.errors import BadRequestError, InternalServerError, NotFoundError
from relay.utils.responses import format_response

router = APIRouter(prefix="/messages", tags=["messages"])

# ---------------------
# Routes
# ---------------------
# Storage failures are logged here and answered with a generic detail.

@router.get("", summary="List all messages, oldest first")
async def list_messages(service: MessageService = Depends(get_message_service)) -> List[dict]:
    try:
        messages = await service.list()
    except Exception:
        logger.exception("Error fetching messages")
        raise InternalServerError("Failed to fetch messages")
    return [m.to_wire() for m in messages]


@router.post("", status_code=201, summary="Create a message and broadcast it")
async def create_message(
    req: MessageCreate,
    service: MessageService = Depends(get_message_service),
) -> dict:
    try:
        saved = await service.create(req.sender_id, req.content, req.conversation_id)
    except MessageValidationError as e:
        raise BadRequestError(str(e))
    except Exception:
        logger.exception("Error creating message")
        raise InternalServerError("Failed to create message")
    return saved.to_wire()


@router.put("/{message_id}", summary="Replace a message's content")
async def update_message(
    message_id: str,
    req: MessageUpdate,
    service: MessageService = Depends(get_message_service),
) -> dict:
    if not req.content:
        raise BadRequestError("content is required")
    try:
        await service.update(message_id, req.content)
    except MessageNotFoundError as e:
        raise NotFoundError(str(e))
    except Exception:
        logger.exception("Error updating message")
        raise InternalServerError("Failed to update message")
    return format_response(success=True, message="Message updated successfully")


@router.delete("/{message_id}", summary="Delete a message")
async def delete_message(
    message_id: str,
    service: MessageService = Depends(get_message_service),
) -> dict:
    try:
        await service.delete(message_id)
    except MessageNotFoundError as e:
        raise NotFoundError(str(e))
    except Exception:
        logger.exception("Error deleting message")
        raise InternalServerError("Failed to delete message")
    return format_response(success=True, message="Message deleted successfully")
