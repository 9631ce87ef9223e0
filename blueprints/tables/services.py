# blueprints/tables/services.py
"""Журнал занятости столов: по каждому столу и дате хранится список занятых слотов.

add_booking/remove_booking меняют агрегат стола в текущей сессии и делают
flush, commit делает вызывающий. Конкурентная запись в ту же строку
журнала ловится на flush (version_id_col / unique(table_id, date)) и
поднимается как BookingConflict.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from extensions import db
from models import RestaurantTable, TableBooking
from .slots import TIME_SLOTS, as_date, booking_span, is_bookable_start

log = logging.getLogger(__name__)


class InvalidSlot(ValueError):
    pass


class BookingConflict(Exception):
    """Слоты стола изменил кто-то другой между чтением и записью."""

    def __init__(self, table_number: int, message: str | None = None):
        self.table_number = table_number
        super().__init__(message or f"Table {table_number} was modified concurrently")


@dataclass
class Availability:
    available_tables: List[int]
    occupied_tables: List[int]


def _span(slot: int) -> List[int]:
    if not is_bookable_start(slot):
        raise InvalidSlot("Slot must be between 1 and 7 (requires 3 consecutive slots)")
    return booking_span(slot)


def _flush(table: RestaurantTable) -> None:
    try:
        db.session.flush()
    except (StaleDataError, IntegrityError) as e:
        log.warning("table booking write conflict", extra={"event": "booking_conflict",
                                                           "table_number": table.table_number})
        raise BookingConflict(table.table_number) from e


def find_booking_for_date(table: RestaurantTable, day) -> Optional[TableBooking]:
    d = as_date(day)
    for b in table.bookings:
        if as_date(b.date) == d:
            return b
    return None


def is_slot_available(table: RestaurantTable, day, slot: int) -> bool:
    booking = find_booking_for_date(table, day)
    if booking is None:
        return True
    taken = set(booking.booked_slots or [])
    return not any(s in taken for s in booking_span(slot))


def add_booking(table: RestaurantTable, day, slot: int) -> bool:
    """Занять span [slot, slot+1, slot+2]. False: хотя бы один слот уже занят (ничего не меняем)."""
    span = _span(slot)
    d = as_date(day)
    booking = find_booking_for_date(table, d)
    if booking is None:
        table.bookings.append(TableBooking(date=d, booked_slots=span))
    else:
        taken = set(booking.booked_slots or [])
        if taken.intersection(span):
            return False
        # JSON-колонку только переприсваиваем, in-place изменения ORM не видит
        booking.booked_slots = sorted(taken.union(span))
    _flush(table)
    return True


def remove_booking(table: RestaurantTable, day, slot: int) -> bool:
    """Освободить span. Пустую строку даты удаляем целиком. False: брони на дату нет."""
    span = _span(slot)
    booking = find_booking_for_date(table, day)
    if booking is None:
        return False
    left = [s for s in (booking.booked_slots or []) if s not in span]
    if left:
        booking.booked_slots = left
    else:
        table.bookings.remove(booking)
    _flush(table)
    return True


def _active_tables() -> List[RestaurantTable]:
    return (RestaurantTable.query
            .options(selectinload(RestaurantTable.bookings))
            .filter_by(is_active=True)
            .order_by(RestaurantTable.table_number)
            .all())


def scan_availability(day, slot: int, required_capacity: int = 1) -> Availability:
    if required_capacity < 1:
        raise ValueError("capacity must be at least 1")
    d = as_date(day)
    available: List[int] = []
    occupied: List[int] = []
    # TODO: отсеивать столы с capacity < required_capacity, когда рассадка станет учитывать гостей
    for t in _active_tables():
        (available if is_slot_available(t, d, slot) else occupied).append(t.table_number)
    return Availability(available_tables=available, occupied_tables=occupied)


def daily_availability_report(day) -> List[Dict]:
    d = as_date(day)
    report = []
    for t in _active_tables():
        booking = find_booking_for_date(t, d)
        booked = sorted(booking.booked_slots) if booking else []
        free = [s.slot for s in TIME_SLOTS if s.slot not in booked]
        report.append({
            "table_number": t.table_number,
            "capacity": t.capacity,
            "booked_slots": booked,
            "available_slots": free,
            "is_fully_booked": not free,
        })
    return report


# ---------- справочник столов ----------
def get_table_by_number(number) -> Optional[RestaurantTable]:
    try:
        n = int(number)
    except (TypeError, ValueError):
        return None
    return RestaurantTable.query.filter_by(table_number=n).first()


def list_tables() -> List[RestaurantTable]:
    return RestaurantTable.query.order_by(RestaurantTable.table_number).all()


def initialize_tables(count: int, capacity: int) -> int:
    """Идемпотентно создаёт столы 1..count. Возвращает число созданных."""
    existing = {n for (n,) in db.session.query(RestaurantTable.table_number).all()}
    created = 0
    for n in range(1, count + 1):
        if n in existing:
            continue
        db.session.add(RestaurantTable(table_number=n, capacity=capacity, is_active=True))
        created += 1
    if created:
        log.info("tables initialized", extra={"event": "tables_initialized"})
    return created


def update_table(t: RestaurantTable, changes: Dict) -> RestaurantTable:
    for key in ("capacity", "notes", "is_active"):
        if key in changes:
            setattr(t, key, changes[key])
    return t


def table_to_dict(t: RestaurantTable) -> Dict:
    return {
        "id": t.id,
        "table_number": t.table_number,
        "capacity": t.capacity,
        "is_active": t.is_active,
        "notes": t.notes,
        "bookings": [
            {"date": b.date.isoformat(), "booked_slots": list(b.booked_slots or [])}
            for b in t.bookings
        ],
    }
