# blueprints/tables/slots.py
"""Фиксированная сетка вечерних слотов по 30 минут (18:00–22:00).

Номер слота ходит между фронтом и API. Неизвестный номер не исключение,
а "N/A"/None, проверять должен вызывающий.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional

NOT_FOUND_LABEL = "N/A"
SPAN_LENGTH = 3  # бронь всегда занимает 3 слота подряд


@dataclass(frozen=True)
class Slot:
    slot: int
    label: str


TIME_SLOTS: tuple[Slot, ...] = (
    Slot(1, "18:00"),
    Slot(2, "18:30"),
    Slot(3, "19:00"),
    Slot(4, "19:30"),
    Slot(5, "20:00"),
    Slot(6, "20:30"),
    Slot(7, "21:00"),
    Slot(8, "21:30"),
    Slot(9, "22:00"),
)

_BY_NUMBER: Dict[int, Slot] = {s.slot: s for s in TIME_SLOTS}
_BY_LABEL: Dict[str, Slot] = {s.label: s for s in TIME_SLOTS}

# последний слот, с которого span ещё помещается в сетку
MAX_START_SLOT = TIME_SLOTS[-1].slot - SPAN_LENGTH + 1


def _lookup(slot_number) -> Optional[Slot]:
    # из query-string номер приходит строкой
    if isinstance(slot_number, str) and slot_number.strip().isdigit():
        slot_number = int(slot_number)
    if isinstance(slot_number, bool) or not isinstance(slot_number, int):
        return None
    return _BY_NUMBER.get(slot_number)


def label_for_slot(slot_number) -> str:
    s = _lookup(slot_number)
    return s.label if s else NOT_FOUND_LABEL


def slot_exists(slot_number) -> bool:
    return _lookup(slot_number) is not None


def slot_for_label(label: str) -> Optional[int]:
    s = _BY_LABEL.get((label or "").strip())
    return s.slot if s else None


def all_slots() -> List[dict]:
    # каждый раз новый список: вызывающий может его мутировать
    return [{"slot": s.slot, "label": s.label} for s in TIME_SLOTS]


def time_components_for_slot(slot_number) -> Optional[dict]:
    s = _lookup(slot_number)
    if not s:
        return None
    hours, minutes = s.label.split(":")
    return {"hours": int(hours), "minutes": int(minutes)}


def is_bookable_start(slot_number) -> bool:
    s = _lookup(slot_number)
    return s is not None and s.slot <= MAX_START_SLOT


def booking_span(slot_number: int) -> List[int]:
    """Слоты, которые занимает бронь, начинающаяся в slot_number."""
    return [slot_number + i for i in range(SPAN_LENGTH)]


def as_date(value) -> date:
    """date | datetime | 'YYYY-MM-DD[...]' -> календарный день (время отбрасываем)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"bad date: {value!r}")
