# blueprints/reservations/services.py
"""Создание/перенос/отмена броней и синхронизация с журналом столов.

Создание и отмена синхронизируют столы "по возможности": бронь уже
сохранена, ошибка по отдельному столу логируется и не валит запрос.
Перенос пользователем и правка админом идут одной транзакцией: любой
конфликт по столу откатывает всё.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import AuditLog, Reservation, ReservationStatus, User
from blueprints.tables.services import (
    BookingConflict, add_booking, get_table_by_number, remove_booking,
)
from .schemas import AdminReservationUpdateIn, ReservationIn, ReservationUpdateIn
from .timing import can_cancel, can_create_or_modify_target
from .validators import validate_update

log = logging.getLogger(__name__)

S = ReservationStatus

# что вообще может прислать админ
ADMIN_STATUSES = (S.CONFIRMED.value, S.SEATED.value, S.COMPLETED.value,
                  S.CANCELLED.value, S.NO_SHOW.value)

TRANSITIONS: Dict[str, set] = {
    S.PENDING.value: {S.CONFIRMED.value, S.CANCELLED.value},
    S.CONFIRMED.value: {S.SEATED.value, S.CANCELLED.value, S.NO_SHOW.value},
    S.SEATED.value: {S.COMPLETED.value},
    S.COMPLETED.value: set(),
    S.CANCELLED.value: set(),
    S.NO_SHOW.value: set(),
}


# ===== ошибки =====
class ReservationError(Exception):
    status = 400
    code = "bad_request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ReservationError):
    status = 404
    code = "not_found"


class Forbidden(ReservationError):
    status = 403
    code = "forbidden"


class PolicyViolation(ReservationError):
    status = 400
    code = "policy_violation"


class SlotConflict(ReservationError):
    status = 409
    code = "booking_conflict"


@dataclass
class BookingOutcome:
    reservation: Reservation
    tables_done: List[int] = field(default_factory=list)
    tables_skipped: List[Dict[str, Any]] = field(default_factory=list)


# ===== helpers =====
def _now() -> datetime:
    return datetime.now(ZoneInfo(current_app.config.get("RESTAURANT_TZ", "UTC")))


def _audit(user_id: Optional[int], action: str, r: Reservation, payload: dict | None = None):
    db.session.add(AuditLog(
        user_id=user_id, action=action, entity="reservation",
        entity_id=r.id, payload=payload or {},
    ))


def _get_or_404(reservation_id: int) -> Reservation:
    r = db.session.get(Reservation, reservation_id)
    if r is None:
        raise NotFound("Reservation not found")
    return r


def _sync_tables_best_effort(r: Reservation, book: bool) -> Tuple[List[int], List[Dict[str, Any]]]:
    """Занять/освободить span на каждом столе брони, по транзакции на стол."""
    numbers = list(r.table_numbers or [])
    day, slot, rid = r.date, r.slot, r.id
    done: List[int] = []
    skipped: List[Dict[str, Any]] = []
    for n in numbers:
        extra = {"event": "table_sync", "reservation_id": rid, "table_number": n}
        table = get_table_by_number(n)
        if table is None:
            log.warning("table not found", extra=extra)
            skipped.append({"table_number": n, "reason": "not_found"})
            continue
        try:
            changed = add_booking(table, day, slot) if book else remove_booking(table, day, slot)
            db.session.commit()
        except (BookingConflict, SQLAlchemyError):
            db.session.rollback()
            log.exception("table booking sync failed", extra=extra)
            skipped.append({"table_number": n, "reason": "storage_error"})
            continue
        if changed:
            done.append(n)
        else:
            reason = "already_booked" if book else "not_booked"
            log.warning("table booking unchanged: %s", reason, extra=extra)
            skipped.append({"table_number": n, "reason": reason})
    return done, skipped


def _release(numbers: List[int], day: date, slot: int, rid: int) -> None:
    for n in numbers:
        table = get_table_by_number(n)
        if table is None:
            log.warning("table not found", extra={"event": "table_release", "reservation_id": rid, "table_number": n})
            continue
        remove_booking(table, day, slot)


# ===== create =====
def create_reservation(user: User, data: ReservationIn, now: Optional[datetime] = None) -> BookingOutcome:
    now = now or _now()
    check = can_create_or_modify_target(data.date, data.slot, now)
    if not check.allowed:
        raise PolicyViolation(check.message)

    r = Reservation(
        user_id=user.id,
        date=data.date,
        slot=data.slot,
        guests=data.guests,
        table_numbers=list(data.table_numbers),
        contact_phone=data.contact_phone,
        contact_email=data.contact_email,
        special_request=data.special_request,
        occasion=data.occasion,
    )
    db.session.add(r)
    user.total_reservations = (user.total_reservations or 0) + 1
    db.session.flush()
    _audit(user.id, "CREATE", r, {"date": r.date.isoformat(), "slot": r.slot, "tables": r.table_numbers})
    db.session.commit()
    log.info("reservation created", extra={"event": "reservation_created", "reservation_id": r.id})

    done, skipped = _sync_tables_best_effort(r, book=True)
    if skipped:
        # за бронью числятся только реально занятые ею столы
        r.table_numbers = list(done)
        db.session.commit()
    return BookingOutcome(reservation=r, tables_done=done, tables_skipped=skipped)


# ===== read =====
def _page_meta(page: int, per_page: int, total: int) -> dict:
    return {"page": page, "per_page": per_page, "total": total}


def list_user_reservations(user: User, *, page: int = 1, per_page: int = 10,
                           status: str | None = None, upcoming: bool = False,
                           past: bool = False, today: date | None = None):
    q = Reservation.query.filter(Reservation.user_id == user.id)
    if status:
        q = q.filter(Reservation.status == status)
    if upcoming or past:
        today = today or _now().date()
        q = q.filter(Reservation.date >= today) if upcoming else q.filter(Reservation.date < today)
    total = q.count()
    items = (q.order_by(Reservation.date.desc(), Reservation.slot.desc())
             .offset((page - 1) * per_page).limit(per_page).all())
    return items, _page_meta(page, per_page, total)


def list_admin_reservations(*, page: int = 1, per_page: int = 10, status: str | None = None,
                            day: date | None = None, search: str | None = None):
    q = Reservation.query.join(User, User.id == Reservation.user_id)
    if status:
        q = q.filter(Reservation.status == status)
    if day:
        q = q.filter(Reservation.date == day)
    if search:
        term = f"%{search.strip()}%"
        q = q.filter(or_(
            User.name.ilike(term),
            User.email.ilike(term),
            Reservation.contact_phone.ilike(term),
            Reservation.reservation_number.ilike(term),
        ))
    total = q.count()
    items = (q.order_by(Reservation.date.asc(), Reservation.slot.asc())
             .offset((page - 1) * per_page).limit(per_page).all())
    return items, _page_meta(page, per_page, total)


def get_reservation_for(user: User, reservation_id: int) -> Reservation:
    r = _get_or_404(reservation_id)
    if r.user_id != user.id and not getattr(user, "is_admin", False):
        raise Forbidden("Not authorized to view this reservation")
    return r


# ===== user update / cancel =====
def update_user_reservation(user: User, reservation_id: int, change: ReservationUpdateIn,
                            now: Optional[datetime] = None) -> Reservation:
    now = now or _now()
    r = _get_or_404(reservation_id)
    if r.user_id != user.id:
        raise Forbidden("Not authorized to update this reservation")
    if r.status != S.CONFIRMED.value:
        raise PolicyViolation("Only confirmed reservations can be updated")

    validation = validate_update(r, {"date": change.date, "slot": change.slot}, now)
    if not validation.is_valid:
        raise PolicyViolation(validation.errors[0])

    moving = change.date is not None or change.slot is not None
    old_date, old_slot = r.date, r.slot
    new_date = change.date or old_date
    new_slot = change.slot or old_slot

    try:
        if moving:
            # по одному столу: сначала освобождаем старый span, потом занимаем новый
            for n in list(r.table_numbers or []):
                table = get_table_by_number(n)
                if table is None:
                    log.warning("table not found", extra={"event": "table_move", "reservation_id": r.id, "table_number": n})
                    continue
                remove_booking(table, old_date, old_slot)
                if not add_booking(table, new_date, new_slot):
                    raise SlotConflict(f"Table {n} is not available for the requested time")
            r.date, r.slot = new_date, new_slot

        fields_set = change.model_fields_set
        if change.guests is not None:
            r.guests = change.guests
        if "special_request" in fields_set:
            r.special_request = change.special_request
        if change.contact_phone:
            r.contact_phone = change.contact_phone

        _audit(user.id, "UPDATE", r, {
            "from": {"date": old_date.isoformat(), "slot": old_slot},
            "to": {"date": r.date.isoformat(), "slot": r.slot},
        })
        db.session.commit()
    except SlotConflict:
        db.session.rollback()
        raise
    except BookingConflict as e:
        db.session.rollback()
        raise SlotConflict(str(e)) from e

    log.info("reservation updated", extra={"event": "reservation_updated", "reservation_id": r.id})
    return r


def cancel_user_reservation(user: User, reservation_id: int, now: Optional[datetime] = None) -> BookingOutcome:
    now = now or _now()
    r = _get_or_404(reservation_id)
    if r.user_id != user.id:
        raise Forbidden("Not authorized to cancel this reservation")
    if r.status in (S.CANCELLED.value, S.COMPLETED.value):
        raise PolicyViolation("Reservation is already cancelled or completed")
    if r.status != S.CONFIRMED.value:
        raise PolicyViolation("Only confirmed reservations can be cancelled")

    check = can_cancel(r.date, r.slot, now)
    if not check.allowed:
        raise PolicyViolation(check.message)

    r.status = S.CANCELLED.value
    user.total_reservations = max((user.total_reservations or 0) - 1, 0)
    _audit(user.id, "CANCEL", r)
    db.session.commit()
    log.info("reservation cancelled", extra={"event": "reservation_cancelled", "reservation_id": r.id})

    done, skipped = _sync_tables_best_effort(r, book=False)
    return BookingOutcome(reservation=r, tables_done=done, tables_skipped=skipped)


# ===== admin =====
def update_admin_reservation(admin: User, reservation_id: int, change: AdminReservationUpdateIn) -> Reservation:
    status = change.status
    if status and status not in ADMIN_STATUSES:
        raise PolicyViolation("Invalid reservation status")

    r = _get_or_404(reservation_id)
    if status and status != r.status and status not in TRANSITIONS.get(r.status, set()):
        raise PolicyViolation(f"Cannot change status from {r.status} to {status}")

    old_tables = list(r.table_numbers or [])
    new_tables = list(dict.fromkeys(change.table_numbers)) if change.table_numbers is not None else old_tables
    target_status = status or r.status
    # у отменённой брони столов в журнале уже нет, освобождать нечего
    holds_tables = r.status != S.CANCELLED.value
    entering_cancel = target_status == S.CANCELLED.value and holds_tables

    try:
        if new_tables != old_tables:
            if holds_tables:
                _release(old_tables, r.date, r.slot, r.id)
            if target_status != S.CANCELLED.value:
                for n in new_tables:
                    table = get_table_by_number(n)
                    if table is None:
                        raise PolicyViolation(f"Table {n} not found")
                    if not add_booking(table, r.date, r.slot):
                        raise SlotConflict(f"Table {n} is already booked for this time")
            r.table_numbers = new_tables
        elif entering_cancel:
            _release(old_tables, r.date, r.slot, r.id)

        if status and status != r.status:
            r.status = status
            if status == S.SEATED.value:
                r.checked_in_at = datetime.utcnow()
            elif status == S.COMPLETED.value:
                r.completed_at = datetime.utcnow()

        fields_set = change.model_fields_set
        if "special_request" in fields_set:
            r.special_request = change.special_request
        if "notes" in fields_set:
            r.notes = change.notes

        _audit(getattr(admin, "id", None), "ADMIN_UPDATE", r, change.model_dump(exclude_unset=True))
        db.session.commit()
    except ReservationError:
        db.session.rollback()
        raise
    except BookingConflict as e:
        db.session.rollback()
        raise SlotConflict(str(e)) from e

    log.info("reservation updated by admin", extra={"event": "reservation_admin_update", "reservation_id": r.id})
    return r
