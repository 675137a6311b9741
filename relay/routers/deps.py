# relay/routers/deps.py

from fastapi import Request

from relay.services.messages import MessageService


def get_message_service(request: Request) -> MessageService:
    return request.app.state.message_service
