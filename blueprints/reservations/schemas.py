from __future__ import annotations
import datetime as dt
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from blueprints.tables.slots import is_bookable_start, label_for_slot

PHONE_PATTERN = r"^[0-9]{10}$"
EMAIL_PATTERN = r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$"
Occasion = Literal["birthday", "anniversary", "date", "business", "family", "celebration", "other"]


def _check_start_slot(v: Optional[int]) -> Optional[int]:
    if v is not None and not is_bookable_start(v):
        raise ValueError("Invalid slot number")
    return v


def _check_table_numbers(v: Optional[List[int]]) -> Optional[List[int]]:
    if v is None:
        return v
    if any(n < 1 for n in v):
        raise ValueError("table numbers must be positive")
    # один стол занимается под бронь один раз
    return list(dict.fromkeys(v))


# ---------- Reservations ----------
class ReservationIn(BaseModel):
    date: dt.date
    slot: int
    guests: int = Field(ge=1, le=20)
    # номера столов могут прийти строками, pydantic приведёт к int
    table_numbers: List[int] = Field(default_factory=list)
    contact_phone: str = Field(pattern=PHONE_PATTERN)
    contact_email: str = Field(pattern=EMAIL_PATTERN)
    special_request: Optional[str] = Field(None, max_length=200)
    occasion: Optional[Occasion] = None

    @field_validator("slot")
    @classmethod
    def check_slot(cls, v: Optional[int]) -> Optional[int]:
        return _check_start_slot(v)

    @field_validator("table_numbers")
    @classmethod
    def check_tables(cls, v: List[int]) -> List[int]:
        return _check_table_numbers(v)


class ReservationUpdateIn(BaseModel):
    date: Optional[dt.date] = None
    slot: Optional[int] = None
    guests: Optional[int] = Field(None, ge=1, le=20)
    special_request: Optional[str] = Field(None, max_length=200)
    contact_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    @field_validator("slot")
    @classmethod
    def check_slot(cls, v: Optional[int]) -> Optional[int]:
        return _check_start_slot(v)


class AdminReservationUpdateIn(BaseModel):
    # статус проверяем в сервисе, чтобы вернуть своё сообщение
    status: Optional[str] = None
    table_numbers: Optional[List[int]] = None
    special_request: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=300)

    @field_validator("table_numbers")
    @classmethod
    def check_tables(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_table_numbers(v)


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_number: str
    user_id: int
    date: dt.date
    slot: int
    guests: int
    status: str
    table_numbers: List[int]
    contact_phone: str
    contact_email: str
    special_request: Optional[str] = None
    occasion: Optional[str] = None
    notes: Optional[str] = None
    checked_in_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    created_at: dt.datetime

    @property
    def time_label(self) -> str:
        return label_for_slot(self.slot)

    def dump(self) -> dict:
        data = self.model_dump(mode="json")
        data["time"] = self.time_label
        return data
