from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from ..core.exceptions import InvalidArgument, UnknownTool
from ..schemas.tool import (
    CreateNoteArguments,
    DeleteNoteArguments,
    ListNotesArguments,
    SearchNotesArguments,
    UpdateNoteArguments,
)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Mapping[str, Any]
    arguments_model: Type[BaseModel]

    def descriptor(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(dict(self.input_schema)),
        }

    def parse_arguments(self, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgument(f"Arguments for '{self.name}' must be an object")
        try:
            return self.arguments_model.model_validate(dict(arguments))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidArgument(f"Invalid arguments for '{self.name}': {problems}") from exc


def _string_property(description: str) -> Dict[str, str]:
    return {"type": "string", "description": description}


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_notes",
        description="Get all sticky notes from the Chrome extension",
        input_schema={"type": "object", "properties": {}, "required": []},
        arguments_model=ListNotesArguments,
    ),
    ToolDefinition(
        name="create_note",
        description="Create a new sticky note",
        input_schema={
            "type": "object",
            "properties": {
                "title": _string_property("The title of the note"),
                "text": _string_property("The content of the note"),
            },
            "required": ["title", "text"],
        },
        arguments_model=CreateNoteArguments,
    ),
    ToolDefinition(
        name="update_note",
        description="Update an existing sticky note",
        input_schema={
            "type": "object",
            "properties": {
                "id": _string_property("The ID of the note to update"),
                "title": _string_property("The new title of the note"),
                "text": _string_property("The new content of the note"),
            },
            "required": ["id"],
        },
        arguments_model=UpdateNoteArguments,
    ),
    ToolDefinition(
        name="delete_note",
        description="Delete a sticky note",
        input_schema={
            "type": "object",
            "properties": {
                "id": _string_property("The ID of the note to delete"),
            },
            "required": ["id"],
        },
        arguments_model=DeleteNoteArguments,
    ),
    ToolDefinition(
        name="search_notes",
        description="Search notes by keyword in title or content",
        input_schema={
            "type": "object",
            "properties": {
                "query": _string_property("The search query"),
            },
            "required": ["query"],
        },
        arguments_model=SearchNotesArguments,
    ),
)

_TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}


def list_tools() -> List[Dict[str, Any]]:
    return [tool.descriptor() for tool in TOOLS]


def get_tool(name: object) -> ToolDefinition:
    if isinstance(name, str) and name in _TOOLS_BY_NAME:
        return _TOOLS_BY_NAME[name]
    raise UnknownTool(name)
