from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from .dependencies import get_config_service, get_event_stream_manager
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan_context(app):  # type: ignore[unused-argument]
    config = get_config_service().load()
    configure_logging(config.logging.level)
    logger.info(
        "Sticky notes MCP server ready (messages_path=%s, keepalive=%ss)",
        config.transport.messages_path,
        config.transport.keepalive_interval_seconds,
    )
    try:
        yield
    finally:
        get_event_stream_manager().close_all()
        logger.info("Sticky notes MCP server stopped")
