from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from ..core.dependencies import get_event_stream_manager, get_session_handler, get_tool_dispatcher
from ..core.exceptions import MalformedEnvelope, NotesServerError
from ..schemas import ToolCallRequest
from ..services.event_stream import EventStreamManager
from ..services.jsonrpc import Reply, SessionHandler, server_descriptor
from ..services.tool_dispatcher import ToolDispatcher
from ..services.tool_registry import list_tools

router = APIRouter(tags=["mcp"])
legacy_router = APIRouter(prefix="/mcp", tags=["mcp-legacy"])

logger = logging.getLogger(__name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get("/sse", name="open_event_stream")
async def open_event_stream(manager: EventStreamManager = Depends(get_event_stream_manager)):
    session = manager.open()
    return StreamingResponse(session.frames(), media_type="text/event-stream", headers=_STREAM_HEADERS)


async def post_message(
    request: Request,
    handler: SessionHandler = Depends(get_session_handler),
) -> Response:
    """Accept one JSON-RPC envelope; registered on the configured messages path."""
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected JSON-RPC post with an unparseable body")
        return PlainTextResponse("Request body must be valid JSON", status_code=400)

    try:
        outcome = handler.handle(payload)
    except MalformedEnvelope as exc:
        logger.warning("Rejected malformed JSON-RPC message: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)

    if isinstance(outcome, Reply):
        return JSONResponse(outcome.envelope)
    return Response(status_code=200 if outcome.ok else 500)


@legacy_router.post("/initialize", name="legacy_initialize")
async def legacy_initialize():
    return server_descriptor()


@legacy_router.post("/tools/list", name="legacy_list_tools")
async def legacy_list_tools():
    return {"tools": list_tools()}


def _tool_execution_error(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": {"code": "TOOL_EXECUTION_ERROR", "message": message}},
    )


@legacy_router.post("/tools/call", name="legacy_call_tool")
async def legacy_call_tool(
    request: Request,
    dispatcher: ToolDispatcher = Depends(get_tool_dispatcher),
):
    try:
        payload = ToolCallRequest.model_validate(await request.json())
    except ValueError as exc:
        logger.warning("Rejected legacy tool call: %s", exc)
        return _tool_execution_error("Request body must be a JSON object with a string 'name'")

    try:
        return dispatcher.call(payload.name, payload.arguments)
    except NotesServerError as exc:
        return _tool_execution_error(str(exc))
