from __future__ import annotations

import datetime as dt
import logging
import threading
import uuid
from typing import Iterable, List, Optional

from ..core.exceptions import InvalidArgument, NotFound
from ..schemas.note import Note, utcnow

logger = logging.getLogger(__name__)


def _next_timestamp(previous: dt.datetime) -> dt.datetime:
    now = utcnow()
    if now <= previous:
        return previous + dt.timedelta(microseconds=1)
    return now


class NoteStore:
    """In-memory, newest-first list of notes guarded by a single lock.

    Stored ``Note`` instances are never mutated; updates swap in a copy at the
    same position, so notes handed out to callers stay consistent snapshots.
    """

    def __init__(self, notes: Iterable[Note] | None = None) -> None:
        self._lock = threading.Lock()
        self._notes: List[Note] = []
        if notes is not None:
            self.replace_all(notes)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._notes)

    def list(self) -> List[Note]:
        with self._lock:
            return list(self._notes)

    def get(self, note_id: str) -> Note:
        with self._lock:
            return self._notes[self._index_of(note_id)]

    def create(self, title: str, text: str) -> Note:
        with self._lock:
            existing = {note.id for note in self._notes}
            note_id = str(uuid.uuid4())
            while note_id in existing:
                note_id = str(uuid.uuid4())
            timestamp = utcnow()
            note = Note(id=note_id, title=title, text=text, created_at=timestamp, updated_at=timestamp)
            self._notes.insert(0, note)
        logger.info("Created note %s", note.id)
        return note

    def update(self, note_id: str, *, title: Optional[str] = None, text: Optional[str] = None) -> Note:
        with self._lock:
            index = self._index_of(note_id)
            current = self._notes[index]
            changes = {"updated_at": _next_timestamp(current.updated_at)}
            # Empty strings leave the field untouched.
            if title:
                changes["title"] = title
            if text:
                changes["text"] = text
            updated = current.model_copy(update=changes)
            self._notes[index] = updated
        logger.info("Updated note %s (fields=%s)", note_id, sorted(changes))
        return updated

    def delete(self, note_id: str) -> None:
        with self._lock:
            del self._notes[self._index_of(note_id)]
        logger.info("Deleted note %s", note_id)

    def search(self, query: str) -> List[Note]:
        if not isinstance(query, str) or not query:
            raise InvalidArgument("Search query must be a non-empty string")
        needle = query.lower()
        with self._lock:
            return [
                note
                for note in self._notes
                if needle in note.title.lower() or needle in note.text.lower()
            ]

    def replace_all(self, notes: Iterable[Note]) -> int:
        incoming = list(notes)
        seen = set()
        for note in incoming:
            if note.id in seen:
                raise InvalidArgument(f"Duplicate note id: {note.id}")
            seen.add(note.id)
        with self._lock:
            self._notes = incoming
        logger.info("Replaced note store contents with %d notes", len(incoming))
        return len(incoming)

    def _index_of(self, note_id: str) -> int:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        raise NotFound(f"Note not found: {note_id}")
