from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, constr

RequiredText = constr(strict=True, min_length=1)
OptionalText = Optional[constr(strict=True)]


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    content: List[TextContent]

    @classmethod
    def from_text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])


class ListNotesArguments(BaseModel):
    pass


class CreateNoteArguments(BaseModel):
    title: RequiredText
    text: RequiredText


class UpdateNoteArguments(BaseModel):
    id: RequiredText
    title: OptionalText = None
    text: OptionalText = None


class DeleteNoteArguments(BaseModel):
    id: RequiredText


class SearchNotesArguments(BaseModel):
    query: RequiredText


class ToolCallRequest(BaseModel):
    name: Optional[str] = None
    arguments: Any = None
