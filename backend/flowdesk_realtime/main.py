import logging
from contextlib import asynccontextmanager

import socketio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from flowdesk_realtime.api import emit, health
from flowdesk_realtime.core.config import settings
from flowdesk_realtime.core.logging import configure_logging
from flowdesk_realtime.core.middleware import RequestContextMiddleware, http_exception_handler
from flowdesk_realtime.realtime import sio

configure_logging()
logger = logging.getLogger(settings.APP_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Realtime server listening on :{settings.PORT} (path /{settings.SOCKETIO_PATH.strip('/')})")
    logger.info(f"Allowed origins: {', '.join(settings.cors_origins)}")
    if not settings.JWT_SECRET:
        logger.warning("JWT_SECRET is not set; every socket handshake will be refused")
    if not settings.REALTIME_SERVER_SECRET:
        logger.warning("REALTIME_SERVER_SECRET is not set; /emit will reject every call")
    yield


app = FastAPI(
    title="flowdesk-realtime",
    description="Realtime fan-out server for FlowDesk",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

# CORS: only allow-listed origins, same list as the Socket.IO server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)

app.include_router(health.router, prefix="", tags=["Health"])
app.include_router(emit.router, prefix="", tags=["Emit"])

# Socket.IO wraps FastAPI: socket traffic goes to sio, everything else to app
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app, socketio_path=settings.SOCKETIO_PATH)


def run():
    uvicorn.run(
        asgi_app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
