from __future__ import annotations

import datetime as dt
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .api import mcp, notes
from .core.dependencies import get_app_config, get_event_stream_manager, get_note_store
from .core.lifespan import lifespan_context
from .services.event_stream import EventStreamManager
from .services.jsonrpc import SERVER_NAME, SERVER_VERSION
from .services.note_store import NoteStore

app_config = get_app_config()

app = FastAPI(
    title="Sticky Notes MCP Server",
    version=SERVER_VERSION,
    lifespan=lifespan_context,
)

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_config.http.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mcp.router)
app.include_router(mcp.legacy_router)
app.include_router(notes.router)
app.add_api_route(
    app_config.transport.messages_path,
    mcp.post_message,
    methods=["POST"],
    tags=["mcp"],
    name="post_message",
)
logger.debug(
    "JSON-RPC messages accepted at %s; CORS origins %s",
    app_config.transport.messages_path,
    app_config.http.cors_allow_origins,
)


@app.get("/health")
async def health(
    store: NoteStore = Depends(get_note_store),
    streams: EventStreamManager = Depends(get_event_stream_manager),
):
    return {
        "status": "healthy",
        "notesCount": store.count,
        "activeStreams": streams.active_count,
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
    }


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return f"{SERVER_NAME} {SERVER_VERSION} is running"
