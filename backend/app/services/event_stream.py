from __future__ import annotations

import asyncio
import logging
import uuid
from typing import AsyncIterator, Dict, Optional

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keep-alive\n\n"


def endpoint_frame(messages_path: str) -> str:
    return f"event: endpoint\ndata: {messages_path}\n\n"


class EventStreamSession:
    """One long-lived event stream announcing the command endpoint.

    The keep-alive task is started on ``__aenter__`` and cancelled by
    :meth:`close`, which is safe to call any number of times.
    """

    def __init__(
        self,
        *,
        messages_path: str = "/messages",
        keepalive_interval: float = 15.0,
        session_id: Optional[str] = None,
        manager: Optional["EventStreamManager"] = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.messages_path = messages_path
        self.keepalive_interval = keepalive_interval
        self._manager = manager
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._keepalive_task: Optional[asyncio.Task[None]] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "EventStreamSession":
        if self._closed:
            raise RuntimeError(f"Event stream {self.session_id} is already closed")
        self._keepalive_task = asyncio.create_task(
            self._keepalive_loop(), name=f"sse-keepalive-{self.session_id}"
        )
        if self._manager is not None:
            self._manager.register(self)
        logger.info("Event stream %s opened", self.session_id)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._keepalive_task is not None:
            self._keepalive_task.cancel()
        self._queue.put_nowait(None)
        if self._manager is not None:
            self._manager.unregister(self)
        logger.info("Event stream %s closed", self.session_id)

    async def frames(self) -> AsyncIterator[str]:
        async with self:
            yield endpoint_frame(self.messages_path)
            while True:
                frame = await self._queue.get()
                if frame is None:
                    break
                yield frame

    async def _keepalive_loop(self) -> None:
        while True:
            await asyncio.sleep(self.keepalive_interval)
            await self._queue.put(KEEPALIVE_FRAME)


class EventStreamManager:
    """Tracks open event streams so they can be reported and shut down."""

    def __init__(self, *, messages_path: str = "/messages", keepalive_interval: float = 15.0) -> None:
        self.messages_path = messages_path
        self.keepalive_interval = keepalive_interval
        self._sessions: Dict[str, EventStreamSession] = {}

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def open(self) -> EventStreamSession:
        return EventStreamSession(
            messages_path=self.messages_path,
            keepalive_interval=self.keepalive_interval,
            manager=self,
        )

    def register(self, session: EventStreamSession) -> None:
        self._sessions[session.session_id] = session

    def unregister(self, session: EventStreamSession) -> None:
        self._sessions.pop(session.session_id, None)

    def close_all(self) -> None:
        sessions = list(self._sessions.values())
        if sessions:
            logger.info("Closing %d open event streams", len(sessions))
        for session in sessions:
            session.close()
