from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"
INTERNAL_ERROR = -32603

RequestId = Union[StrictStr, StrictInt, StrictFloat, None]


class JSONRPCRequest(BaseModel):
    """Inbound envelope. A request carries an ``id`` key; a notification does not."""

    jsonrpc: Optional[str] = JSONRPC_VERSION
    id: RequestId = None
    method: StrictStr
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class JSONRPCErrorObject(BaseModel):
    code: int
    message: str


class JSONRPCResultResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: RequestId
    result: Dict[str, Any]


class JSONRPCErrorResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: RequestId
    error: JSONRPCErrorObject
