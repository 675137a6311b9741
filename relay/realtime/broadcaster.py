# relay/realtime/broadcaster.py

from typing import Any

import socketio

# Outbound event names
EXISTING_MESSAGES = "existingMessages"
NEW_MESSAGE = "newMessage"
MESSAGE_UPDATED = "messageUpdated"
MESSAGE_DELETED = "messageDeleted"
ERROR = "error"


class Broadcaster:
    """Thin wrapper over ``AsyncServer.emit``; Socket.IO queues per client."""

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio

    async def broadcast(self, event: str, data: Any) -> None:
        await self.sio.emit(event, data)

    async def send(self, sid: str, event: str, data: Any) -> None:
        await self.sio.emit(event, data, to=sid)

    async def send_error(self, sid: str, message: str) -> None:
        await self.send(sid, ERROR, {"message": message})
