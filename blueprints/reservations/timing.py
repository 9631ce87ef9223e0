# blueprints/reservations/timing.py
"""Время брони и окна на создание/изменение/отмену.

Все проверки принимают `now` явно и никогда не читают часы сами:
тесты подставляют фиксированный момент. Целевой момент строится в том же
tzinfo, что и `now` (naive с naive, aware с aware).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from blueprints.tables.slots import as_date, time_components_for_slot

MODIFY_LEAD_HOURS = 1
CANCEL_LEAD_HOURS = 2

MSG_NEW_TIME_TOO_SOON = "New reservation time must be at least 1 hour from now"
MSG_MODIFY_TOO_LATE = "Cannot modify reservation less than 1 hour before the original time"
MSG_CANCEL_TOO_LATE = "Reservations can only be cancelled at least 2 hours in advance"


@dataclass
class LeadTimeCheck:
    allowed: bool
    hours_until: float
    message: Optional[str] = None


def datetime_for_slot(day, slot: int, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    parts = time_components_for_slot(slot)
    if not parts:
        return None
    d = as_date(day)
    return datetime(d.year, d.month, d.day, parts["hours"], parts["minutes"], tzinfo=tz)


def hours_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0


def _check_lead_time(day, slot: int, now: datetime, min_hours: float,
                     message: str, invalid_message: str) -> LeadTimeCheck:
    target = datetime_for_slot(day, slot, tz=now.tzinfo)
    if target is None:
        return LeadTimeCheck(allowed=False, hours_until=0.0, message=invalid_message)
    hours_until = hours_between(target, now)
    if hours_until < min_hours:
        return LeadTimeCheck(allowed=False, hours_until=hours_until, message=message)
    return LeadTimeCheck(allowed=True, hours_until=hours_until)


def can_create_or_modify_target(day, slot: int, now: datetime) -> LeadTimeCheck:
    """Новое время брони должно быть не раньше чем через час."""
    return _check_lead_time(day, slot, now, MODIFY_LEAD_HOURS,
                            MSG_NEW_TIME_TOO_SOON, "Invalid new slot time")


def can_modify_existing(day, slot: int, now: datetime) -> LeadTimeCheck:
    """Тот же порог, но к исходному времени уже существующей брони."""
    return _check_lead_time(day, slot, now, MODIFY_LEAD_HOURS,
                            MSG_MODIFY_TOO_LATE, "Invalid original slot time")


def can_cancel(day, slot: int, now: datetime) -> LeadTimeCheck:
    return _check_lead_time(day, slot, now, CANCEL_LEAD_HOURS,
                            MSG_CANCEL_TOO_LATE, "Invalid reservation slot time")
