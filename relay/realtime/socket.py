# relay/realtime/socket.py

import socketio

from relay.core.config import Settings


def create_socket_server(settings: Settings) -> socketio.AsyncServer:
    origins = settings.CORS_ALLOW_ORIGINS
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins="*" if "*" in origins else origins,
    )
