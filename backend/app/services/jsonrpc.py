from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from ..core.exceptions import InvalidArgument, MalformedEnvelope, NotesServerError
from ..schemas.jsonrpc import (
    INTERNAL_ERROR,
    JSONRPCErrorObject,
    JSONRPCErrorResponse,
    JSONRPCRequest,
    JSONRPCResultResponse,
)
from .tool_dispatcher import ToolDispatcher
from .tool_registry import list_tools

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "sticky-notes-mcp"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reply:
    envelope: Dict[str, Any]


@dataclass(frozen=True)
class NoReply:
    ok: bool = True


DispatchOutcome = Union[Reply, NoReply]


def server_descriptor() -> Dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}, "resources": {}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


def parse_envelope(payload: Any) -> JSONRPCRequest:
    if not isinstance(payload, dict):
        raise MalformedEnvelope("JSON-RPC message must be a JSON object")
    if "method" not in payload:
        raise MalformedEnvelope("Missing 'method' in JSON-RPC message")
    try:
        return JSONRPCRequest.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise MalformedEnvelope(f"Invalid JSON-RPC message ({location}): {error['msg']}") from exc


class SessionHandler:
    """Routes one JSON-RPC envelope and shapes the reply.

    Requests (``id`` present) always produce exactly one :class:`Reply` carrying
    that id; notifications always produce :class:`NoReply`. Failures raised
    while computing a result become ``-32603`` error envelopes for requests and
    a failed ``NoReply`` for notifications.
    """

    def __init__(self, dispatcher: ToolDispatcher) -> None:
        self.dispatcher = dispatcher
        self._methods: Dict[str, Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]] = {
            "initialize": self._initialize,
            "notifications/initialized": self._initialized,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    def handle(self, payload: Any) -> DispatchOutcome:
        request = parse_envelope(payload)
        try:
            result = self._dispatch(request)
        except Exception as exc:
            self._log_failure(request, exc)
            if request.is_notification:
                return NoReply(ok=False)
            response = JSONRPCErrorResponse(
                id=request.id,
                error=JSONRPCErrorObject(code=INTERNAL_ERROR, message=str(exc) or type(exc).__name__),
            )
            return Reply(response.model_dump(mode="json"))

        if request.is_notification:
            return NoReply()
        response = JSONRPCResultResponse(id=request.id, result=result or {})
        return Reply(response.model_dump(mode="json"))

    def _dispatch(self, request: JSONRPCRequest) -> Optional[Dict[str, Any]]:
        params = request.params if request.params is not None else {}
        if not isinstance(params, dict):
            raise InvalidArgument("'params' must be an object")
        method = self._methods.get(request.method)
        if method is None:
            logger.debug("Ignoring unsupported method '%s'", request.method)
            return None
        return method(params)

    def _log_failure(self, request: JSONRPCRequest, exc: Exception) -> None:
        if isinstance(exc, NotesServerError):
            logger.warning("JSON-RPC method '%s' failed: %s", request.method, exc)
        else:
            logger.exception("Unexpected failure handling JSON-RPC method '%s'", request.method)

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        client_info = params.get("clientInfo") or {}
        logger.info(
            "Client initializing session (client=%s, protocol=%s)",
            client_info.get("name") if isinstance(client_info, dict) else None,
            params.get("protocolVersion"),
        )
        return server_descriptor()

    def _initialized(self, params: Dict[str, Any]) -> None:
        logger.info("Client finished initialization")
        return None

    def _tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": list_tools()}

    def _tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidArgument("'params.name' must be a non-empty string")
        return self.dispatcher.call(name, params.get("arguments"))
