# relay/realtime/channel.py

from typing import Any, Awaitable, Callable

import socketio
from pydantic import BaseModel, ValidationError

from relay.core.exceptions import MessageNotFoundError, MessageValidationError
from relay.core.logger import logger
from relay.models.message import MessageCreate, MessageEdit, MessageRemove
from relay.realtime.broadcaster import EXISTING_MESSAGES, Broadcaster
from relay.services.messages import MessageService


class MessageChannel:
    """Socket.IO handlers: initial sync on connect, then send/update/delete events."""

    def __init__(self, sio: socketio.AsyncServer, service: MessageService, broadcaster: Broadcaster):
        self.sio = sio
        self.service = service
        self.broadcaster = broadcaster

    def register(self) -> None:
        self.sio.on("connect", handler=self.on_connect)
        self.sio.on("disconnect", handler=self.on_disconnect)
        self.sio.on("sendMessage", handler=self.on_send_message)
        self.sio.on("updateMessage", handler=self.on_update_message)
        self.sio.on("deleteMessage", handler=self.on_delete_message)

    # ---------------------
    # Connection lifecycle
    # ---------------------

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.info(f"A user connected: {sid}")
        # Not awaited: broadcasts may reach the client before its initial list.
        self.sio.start_background_task(self.send_existing_messages, sid)

    async def on_disconnect(self, sid: str, *args) -> None:
        logger.info(f"User disconnected: {sid}")

    async def send_existing_messages(self, sid: str) -> None:
        try:
            messages = await self.service.list()
        except Exception:
            logger.exception(f"Error fetching messages for {sid}")
            await self.broadcaster.send_error(sid, "Failed to fetch messages")
            return
        await self.broadcaster.send(sid, EXISTING_MESSAGES, [m.to_wire() for m in messages])

    # ---------------------
    # Inbound events
    # ---------------------

    async def on_send_message(self, sid: str, data: Any = None) -> None:
        async def send(payload: MessageCreate):
            await self.service.create(payload.sender_id, payload.content, payload.conversation_id)

        await self._dispatch(sid, "sendMessage", data, MessageCreate, send, "Failed to send message")

    async def on_update_message(self, sid: str, data: Any = None) -> None:
        async def update(payload: MessageEdit):
            await self.service.update(payload.id, payload.content)

        await self._dispatch(sid, "updateMessage", data, MessageEdit, update, "Failed to update message")

    async def on_delete_message(self, sid: str, data: Any = None) -> None:
        async def delete(payload: MessageRemove):
            await self.service.delete(payload.id)

        await self._dispatch(sid, "deleteMessage", data, MessageRemove, delete, "Failed to delete message")

    async def _dispatch(
        self,
        sid: str,
        event: str,
        data: Any,
        model: type[BaseModel],
        action: Callable[[Any], Awaitable[None]],
        failure: str,
    ) -> None:
        """Parse the payload and run the action; every failure goes back to ``sid`` only."""
        try:
            payload = model.model_validate(data if data is not None else {})
        except ValidationError:
            await self.broadcaster.send_error(sid, f"Invalid {event} payload")
            return

        try:
            await action(payload)
        except (MessageValidationError, MessageNotFoundError) as e:
            await self.broadcaster.send_error(sid, str(e))
        except Exception:
            logger.exception(f"Error handling {event}")
            await self.broadcaster.send_error(sid, failure)
