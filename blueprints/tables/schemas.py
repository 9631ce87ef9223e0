from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .slots import is_bookable_start

class TableUpdateIn(BaseModel):
    capacity: Optional[int] = Field(None, ge=1, le=12)
    notes: Optional[str] = Field(None, max_length=200)
    is_active: Optional[bool] = None

class TableBookingIn(BaseModel):
    date: dt.date
    slot: int

    @field_validator("slot")
    @classmethod
    def check_slot(cls, v: int) -> int:
        if not is_bookable_start(v):
            raise ValueError("Slot must be between 1 and 7 (requires 3 consecutive slots)")
        return v
