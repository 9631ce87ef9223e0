from __future__ import annotations
from datetime import date, datetime
from zoneinfo import ZoneInfo

from blueprints.reservations import timing
from blueprints.tables.slots import all_slots

TZ = ZoneInfo("Europe/Berlin")
DAY = date(2025, 6, 1)

def test_datetime_for_slot_uses_tz():
    dt_ = timing.datetime_for_slot(DAY, 5, TZ)
    assert dt_ == datetime(2025, 6, 1, 20, 0, tzinfo=TZ)
    assert timing.datetime_for_slot("2025-06-01", 1) == datetime(2025, 6, 1, 18, 0)
    assert timing.datetime_for_slot(DAY, 10) is None

def test_hours_between_antisymmetric():
    a = datetime(2025, 6, 1, 20, 0)
    b = datetime(2025, 6, 1, 17, 30)
    assert timing.hours_between(a, b) == 2.5
    assert timing.hours_between(b, a) == -2.5

def test_create_or_modify_window():
    ok = timing.can_create_or_modify_target(DAY, 5, datetime(2025, 6, 1, 17, 30, tzinfo=TZ))
    assert ok.allowed is True and ok.hours_until == 2.5 and ok.message is None

    late = timing.can_create_or_modify_target(DAY, 5, datetime(2025, 6, 1, 19, 30, tzinfo=TZ))
    assert late.allowed is False
    assert late.hours_until == 0.5
    assert late.message == timing.MSG_NEW_TIME_TOO_SOON

def test_exactly_one_hour_is_allowed():
    res = timing.can_create_or_modify_target(DAY, 5, datetime(2025, 6, 1, 19, 0))
    assert res.allowed is True and res.hours_until == 1.0

def test_cancel_window():
    ok = timing.can_cancel(DAY, 5, datetime(2025, 6, 1, 17, 0, tzinfo=TZ))
    assert ok.allowed is True and ok.hours_until == 3.0

    late = timing.can_cancel(DAY, 5, datetime(2025, 6, 1, 19, 0, tzinfo=TZ))
    assert late.allowed is False
    assert "at least 2 hours" in late.message

def test_past_reservation_negative_hours():
    res = timing.can_modify_existing(DAY, 1, datetime(2025, 6, 1, 21, 0))
    assert res.allowed is False
    assert res.hours_until == -3.0
    assert res.message == timing.MSG_MODIFY_TOO_LATE

def test_invalid_slot_messages():
    now = datetime(2025, 6, 1, 12, 0)
    assert timing.can_create_or_modify_target(DAY, 0, now).message == "Invalid new slot time"
    assert timing.can_modify_existing(DAY, 12, now).message == "Invalid original slot time"
    res = timing.can_cancel(DAY, 99, now)
    assert res.allowed is False and res.message == "Invalid reservation slot time"

def test_datetime_for_every_slot_matches_label():
    for item in all_slots():
        at = timing.datetime_for_slot(DAY, item["slot"], TZ)
        assert at.strftime("%H:%M") == item["label"]
        assert at.date() == DAY and at.tzinfo is TZ
