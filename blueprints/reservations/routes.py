# blueprints/reservations/routes.py
from __future__ import annotations
from datetime import date

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user, login_required

from blueprints.auth.routes import admin_required
from . import services as svc
from .schemas import (
    AdminReservationUpdateIn, ReservationIn, ReservationOut, ReservationUpdateIn,
)

api_bp = Blueprint("reservations_api", __name__)

def _out(r) -> dict:
    return ReservationOut.model_validate(r).dump()

def _body(schema):
    return schema.model_validate(request.get_json(silent=True) or {})

def _page_args() -> tuple[int, int]:
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    per_page = min(max(request.args.get("limit", 10, type=int) or 10, 1), 100)
    return page, per_page

def _tables_payload(outcome: svc.BookingOutcome) -> dict:
    return {"done": outcome.tables_done, "skipped": outcome.tables_skipped}

@api_bp.app_errorhandler(svc.ReservationError)
def _reservation_error(err: svc.ReservationError):
    return jsonify({"ok": False, "error": err.code, "message": err.message}), err.status

# ---------- пользователь ----------
@api_bp.post("/reservations")
@login_required
def reservation_create():
    data = _body(ReservationIn)
    outcome = svc.create_reservation(current_user, data)
    return jsonify({
        "ok": True,
        "message": "Reservation created successfully",
        "reservation": _out(outcome.reservation),
        "tables": _tables_payload(outcome),
    }), 201

@api_bp.get("/reservations")
@login_required
def reservation_list():
    page, per_page = _page_args()
    items, meta = svc.list_user_reservations(
        current_user, page=page, per_page=per_page,
        status=request.args.get("status"),
        upcoming=request.args.get("upcoming") == "true",
        past=request.args.get("past") == "true",
    )
    return jsonify({"ok": True, "items": [_out(r) for r in items], "meta": meta})

@api_bp.get("/reservations/<int:rid>")
@login_required
def reservation_get(rid: int):
    return jsonify({"ok": True, "reservation": _out(svc.get_reservation_for(current_user, rid))})

@api_bp.put("/reservations/<int:rid>")
@login_required
def reservation_update(rid: int):
    change = _body(ReservationUpdateIn)
    r = svc.update_user_reservation(current_user, rid, change)
    return jsonify({"ok": True, "message": "Reservation updated successfully", "reservation": _out(r)})

@api_bp.delete("/reservations/<int:rid>")
@login_required
def reservation_cancel(rid: int):
    outcome = svc.cancel_user_reservation(current_user, rid)
    return jsonify({
        "ok": True,
        "message": "Reservation cancelled successfully",
        "reservation": _out(outcome.reservation),
        "tables": _tables_payload(outcome),
    })

# ----- ADMIN API -----
@api_bp.get("/reservations/admin/all")
@admin_required
def admin_reservation_list():
    page, per_page = _page_args()
    raw_date = request.args.get("date")
    try:
        day = date.fromisoformat(raw_date) if raw_date else None
    except ValueError:
        abort(400, description="Bad date")
    items, meta = svc.list_admin_reservations(
        page=page, per_page=per_page,
        status=request.args.get("status"),
        day=day,
        search=request.args.get("search"),
    )
    return jsonify({"ok": True, "items": [_out(r) for r in items], "meta": meta})

@api_bp.put("/reservations/admin/<int:rid>")
@admin_required
def admin_reservation_update(rid: int):
    change = _body(AdminReservationUpdateIn)
    r = svc.update_admin_reservation(current_user, rid, change)
    return jsonify({"ok": True, "message": "Reservation updated successfully", "reservation": _out(r)})
