from __future__ import annotations


class NotesServerError(Exception):
    """Base class for failures raised by the notes MCP core."""


class MalformedEnvelope(NotesServerError):
    """The inbound payload cannot be read as a JSON-RPC command."""


class InvalidArgument(NotesServerError, ValueError):
    pass


class NotFound(NotesServerError, LookupError):
    pass


class UnknownTool(NotesServerError):
    def __init__(self, name: object) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name
