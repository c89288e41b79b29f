from .jsonrpc import (
    JSONRPCErrorObject,
    JSONRPCErrorResponse,
    JSONRPCRequest,
    JSONRPCResultResponse,
)
from .note import Note, SyncRequest, SyncResponse
from .tool import (
    CreateNoteArguments,
    DeleteNoteArguments,
    ListNotesArguments,
    SearchNotesArguments,
    TextContent,
    ToolCallRequest,
    ToolResult,
    UpdateNoteArguments,
)

__all__ = [
    "JSONRPCRequest",
    "JSONRPCErrorObject",
    "JSONRPCResultResponse",
    "JSONRPCErrorResponse",
    "Note",
    "SyncRequest",
    "SyncResponse",
    "TextContent",
    "ToolResult",
    "ToolCallRequest",
    "ListNotesArguments",
    "CreateNoteArguments",
    "UpdateNoteArguments",
    "DeleteNoteArguments",
    "SearchNotesArguments",
]
