from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class PlantRecord(BaseModel):
    """A plant observation as shown to the user.

    Read-only within the query pipeline: records are created by the insert
    flow and only ever read and displayed afterwards.
    """
    id: str  # Store-assigned identity, stable for the record's lifetime
    name: str = ""
    type: str = ""
    location: str = ""
    date_added: Optional[datetime] = None  # None when absent or unparseable
    date_added_display: str  # Canonical 'YYYY-MM-DD HH:MM' or a placeholder text

    @field_validator("id")
    @classmethod
    def _id_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("PlantRecord id must not be empty")
        return value
