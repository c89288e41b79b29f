from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from ..core.dependencies import get_note_store
from ..core.exceptions import InvalidArgument
from ..schemas import SyncRequest, SyncResponse
from ..services.note_store import NoteStore

router = APIRouter(tags=["notes"])

logger = logging.getLogger(__name__)


@router.get("/notes", name="list_notes")
async def list_notes(store: NoteStore = Depends(get_note_store)):
    return {"notes": [note.to_payload() for note in store.list()]}


@router.post("/sync", response_model=SyncResponse, name="sync_notes")
async def sync_notes(request: Request, store: NoteStore = Depends(get_note_store)):
    try:
        body = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be valid JSON") from exc
    if not isinstance(body, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Request body must be a JSON object")

    try:
        payload = SyncRequest.model_validate(body)
        count = store.replace_all(payload.notes or [])
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        logger.warning("Rejected note sync: %s %s", location, error["msg"])
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid notes payload at '{location}': {error['msg']}",
        ) from exc
    except InvalidArgument as exc:
        logger.warning("Rejected note sync: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return SyncResponse(success=True, message="Notes synced successfully", count=count)
