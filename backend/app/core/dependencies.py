from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from ..core.config import AppConfig
from ..services.config_loader import ConfigService, create_config_service
from ..services.event_stream import EventStreamManager
from ..services.jsonrpc import SessionHandler
from ..services.note_store import NoteStore
from ..services.tool_dispatcher import ToolDispatcher


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    return create_config_service()


def get_app_config() -> AppConfig:
    return get_config_service().get()


@lru_cache(maxsize=1)
def get_note_store() -> NoteStore:
    return NoteStore()


@lru_cache(maxsize=1)
def get_event_stream_manager() -> EventStreamManager:
    transport = get_app_config().transport
    return EventStreamManager(
        messages_path=transport.messages_path,
        keepalive_interval=transport.keepalive_interval_seconds,
    )


def get_tool_dispatcher(store: NoteStore = Depends(get_note_store)) -> ToolDispatcher:
    return ToolDispatcher(store)


def get_session_handler(
    dispatcher: ToolDispatcher = Depends(get_tool_dispatcher),
) -> SessionHandler:
    return SessionHandler(dispatcher)
