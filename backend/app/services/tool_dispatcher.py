from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from ..core.exceptions import NotesServerError
from ..schemas.note import Note
from ..schemas.tool import ToolResult
from .note_store import NoteStore
from .tool_registry import get_tool

logger = logging.getLogger(__name__)


def _dump(notes: Note | Iterable[Note]) -> str:
    if isinstance(notes, Note):
        payload: Any = notes.to_payload()
    else:
        payload = [note.to_payload() for note in notes]
    return json.dumps(payload, indent=2, ensure_ascii=False)


class ToolDispatcher:
    """Routes a validated ``tools/call`` to the note store it was given."""

    def __init__(self, store: NoteStore) -> None:
        self.store = store

    def call(self, name: object, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        tool = get_tool(name)
        args = tool.parse_arguments(arguments)
        logger.info("Executing tool %s", tool.name)
        try:
            handler = getattr(self, f"_{tool.name}")
            text = handler(args)
        except NotesServerError as exc:
            logger.warning("Tool %s failed: %s", tool.name, exc)
            raise
        return ToolResult.from_text(text).model_dump()

    def _list_notes(self, args) -> str:
        return _dump(self.store.list())

    def _create_note(self, args) -> str:
        note = self.store.create(args.title, args.text)
        return f"Note created successfully: {_dump(note)}"

    def _update_note(self, args) -> str:
        note = self.store.update(args.id, title=args.title, text=args.text)
        return f"Note updated successfully: {_dump(note)}"

    def _delete_note(self, args) -> str:
        self.store.delete(args.id)
        return "Note deleted successfully"

    def _search_notes(self, args) -> str:
        matches = self.store.search(args.query)
        return f"Found {len(matches)} notes:\n{_dump(matches)}"
