# blueprints/tables/routes.py
from __future__ import annotations
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from extensions import db
from models import RestaurantTable
from blueprints.auth.routes import admin_required
from . import services as svc
from .schemas import TableBookingIn, TableUpdateIn
from .slots import all_slots, slot_exists

api_bp = Blueprint("tables_api", __name__)

def error(msg: str, status: int = 400, code: str | None = None):
    payload = {"ok": False, "error": msg}
    if code: payload["code"] = code
    return jsonify(payload), status

def _parse_date(s: str | None) -> date | None:
    try:
        return date.fromisoformat(s) if s else None
    except ValueError:
        return None

def _table_or_404(tid: int):
    t = db.session.get(RestaurantTable, tid)
    if t is None:
        return None, error("Table not found", 404, "not_found")
    return t, None

# ---------- слоты ----------
@api_bp.get("/slots")
def list_slots():
    return jsonify({"ok": True, "items": all_slots()})

# ---------- доступность (любой залогиненный) ----------
@api_bp.get("/tables/availability")
@login_required
def table_availability():
    raw = request.args.get("date")
    if not raw:
        return error("Date parameter is required")
    d = _parse_date(raw)
    if d is None:
        return error("Bad date")
    return jsonify({"ok": True, "date": d.isoformat(), "items": svc.daily_availability_report(d)})

@api_bp.get("/tables/available")
@login_required
def available_tables():
    raw_date, raw_slot = request.args.get("date"), request.args.get("slot")
    if not raw_date or not raw_slot:
        return error("Date and slot parameters are required")
    d = _parse_date(raw_date)
    if d is None:
        return error("Bad date")
    if not slot_exists(raw_slot):
        return error("Slot must be between 1 and 9")
    capacity = request.args.get("capacity", 1, type=int)
    if capacity is None or capacity < 1:
        return error("Capacity must be at least 1")

    res = svc.scan_availability(d, int(raw_slot), capacity)
    return jsonify({"ok": True, "available_tables": res.available_tables,
                    "occupied_tables": res.occupied_tables})

# ---------- ADMIN ----------
@api_bp.get("/tables")
@admin_required
def tables_list():
    items = [svc.table_to_dict(t) for t in svc.list_tables()]
    return jsonify({"ok": True, "count": len(items), "items": items})

@api_bp.post("/tables/initialize")
@admin_required
def tables_initialize():
    cfg = current_app.config
    created = svc.initialize_tables(cfg.get("TABLE_COUNT", 12), cfg.get("DEFAULT_TABLE_CAPACITY", 4))
    db.session.commit()
    return jsonify({"ok": True, "created": created})

@api_bp.get("/tables/<int:tid>")
@admin_required
def table_get(tid: int):
    t, err = _table_or_404(tid)
    if err: return err
    return jsonify({"ok": True, "item": svc.table_to_dict(t)})

@api_bp.put("/tables/<int:tid>")
@admin_required
def table_update(tid: int):
    t, err = _table_or_404(tid)
    if err: return err
    data = TableUpdateIn.model_validate(request.get_json(silent=True) or {})
    svc.update_table(t, data.model_dump(exclude_unset=True))
    db.session.commit()
    return jsonify({"ok": True, "item": svc.table_to_dict(t)})

@api_bp.post("/tables/<int:tid>/bookings")
@admin_required
def table_booking_add(tid: int):
    t, err = _table_or_404(tid)
    if err: return err
    data = TableBookingIn.model_validate(request.get_json(silent=True) or {})
    try:
        booked = svc.add_booking(t, data.date, data.slot)
        db.session.commit()
    except svc.BookingConflict as e:
        db.session.rollback()
        return error(str(e), 409, "booking_conflict")
    if not booked:
        return error("Slot is already booked", 409, "already_booked")
    return jsonify({"ok": True, "item": svc.table_to_dict(t)})

@api_bp.delete("/tables/<int:tid>/bookings")
@admin_required
def table_booking_remove(tid: int):
    t, err = _table_or_404(tid)
    if err: return err
    data = TableBookingIn.model_validate(request.get_json(silent=True) or {})
    try:
        svc.remove_booking(t, data.date, data.slot)
        db.session.commit()
    except svc.BookingConflict as e:
        db.session.rollback()
        return error(str(e), 409, "booking_conflict")
    return jsonify({"ok": True, "item": svc.table_to_dict(t)})
