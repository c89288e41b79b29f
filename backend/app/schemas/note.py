from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, constr, field_validator


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Note(BaseModel):
    """A sticky note. Unknown fields sent by the browser extension are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: constr(min_length=1)
    title: str = ""
    text: str = ""
    created_at: dt.datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: dt.datetime = Field(default_factory=utcnow, alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_timezone(cls, value: dt.datetime) -> dt.datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SyncRequest(BaseModel):
    notes: Optional[List[Note]] = None


class SyncResponse(BaseModel):
    success: bool
    message: str
    count: int
