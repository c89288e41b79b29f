from __future__ import annotations

import asyncio
import logging
import socket
from types import FrameType
from typing import List, Optional

import uvicorn

from .config import AppConfig
from ..services.event_stream import EventStreamManager
from .dependencies import get_event_stream_manager

logger = logging.getLogger(__name__)


class NotesServer(uvicorn.Server):
    """uvicorn server that ends open event streams as soon as shutdown begins.

    uvicorn only runs the lifespan shutdown after every connection has
    drained, and an event stream never drains on its own.
    """

    def __init__(self, config: uvicorn.Config, *, streams: EventStreamManager) -> None:
        super().__init__(config)
        self.streams = streams
        self._event_loop: Optional[asyncio.AbstractEventLoop] = None

    async def startup(self, sockets: Optional[List[socket.socket]] = None) -> None:
        self._event_loop = asyncio.get_running_loop()
        await super().startup(sockets=sockets)

    def handle_exit(self, sig: int, frame: Optional[FrameType]) -> None:
        super().handle_exit(sig, frame)
        logger.info("Shutdown requested; ending %d open event streams", self.streams.active_count)
        loop = self._event_loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self.streams.close_all)
        else:
            self.streams.close_all()


def build_server(config: AppConfig, app: str = "backend.app.main:app") -> NotesServer:
    uvicorn_config = uvicorn.Config(
        app,
        host=config.http.host,
        port=config.http.port,
        log_level=config.logging.level.lower(),
        timeout_graceful_shutdown=config.http.shutdown_timeout_seconds,
    )
    return NotesServer(uvicorn_config, streams=get_event_stream_manager())
