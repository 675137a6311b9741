# relay/main.py
from typing import Optional

import socketio
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from relay.core.config import Settings, settings as default_settings
from relay.core.logger import logger
from relay.db.mongo import MongoMessageStore
from relay.db.store import MessageStore
from relay.realtime.broadcaster import Broadcaster
from relay.realtime.channel import MessageChannel
from relay.realtime.socket import create_socket_server
from relay.routers import messages
from relay.services.messages import MessageService
from relay.utils.responses import format_error_response

SERVICE_NAME = "Chat Relay"


def build_store(settings: Settings) -> MessageStore:
    if settings.USE_IN_MEMORY_STORAGE:
        return MessageStore()
    return MessageStore(durable=MongoMessageStore.from_settings(settings))


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MessageStore] = None,
    sio: Optional[socketio.AsyncServer] = None,
) -> FastAPI:
    settings = settings or default_settings
    store = store or build_store(settings)
    sio = sio or create_socket_server(settings)

    broadcaster = Broadcaster(sio)
    service = MessageService(store, broadcaster)
    MessageChannel(sio, service, broadcaster).register()

    app = FastAPI(
        title=SERVICE_NAME,
        version="0.1.0",
        description="REST and Socket.IO relay for chat messages",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.sio = sio
    app.state.message_service = service

    # ✅ CORS (the API also needs PUT/DELETE on top of the configured methods)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=sorted(set(settings.CORS_ALLOW_METHODS) | {"PUT", "DELETE"}),
        allow_headers=["*"],
    )

    # ✅ Startup/shutdown
    @app.on_event("startup")
    async def startup():
        ready = store.start()
        if settings.STORAGE_AWAIT_CONNECTION:
            backend = await ready
            logger.info(f"Storage ready: {backend.value}")

    @app.on_event("shutdown")
    async def shutdown():
        store.close()

    # ✅ Health check
    @app.get("/", tags=["root"], summary="Health check")
    async def root():
        return {"status": "ok", "service": SERVICE_NAME, "storage": store.backend.value}

    # ✅ Error handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=format_error_response(exc, status_code=exc.status_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=format_error_response(exc, status_code=400, detail="Invalid request body"),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=format_error_response(exc, detail="Internal server error"),
        )

    # ✅ Routes
    app.include_router(messages.router, prefix="/api")

    return app


app = create_app()
asgi_app = socketio.ASGIApp(app.state.sio, other_asgi_app=app)


def run():
    logger.info(f"Server running on port {default_settings.PORT}")
    uvicorn.run(asgi_app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
