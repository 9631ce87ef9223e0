from __future__ import annotations
from datetime import date, datetime
import pytest

from blueprints.tables import slots

def test_label_slot_round_trip():
    for s in range(1, 10):
        assert slots.slot_for_label(slots.label_for_slot(s)) == s
    assert slots.label_for_slot(1) == "18:00"
    assert slots.label_for_slot(9) == "22:00"

@pytest.mark.parametrize("bad", [0, 10, -1, None, "x", True, 5.0])
def test_unknown_slot_is_sentinel(bad):
    assert slots.label_for_slot(bad) == slots.NOT_FOUND_LABEL
    assert slots.slot_exists(bad) is False
    assert slots.time_components_for_slot(bad) is None

def test_slot_from_query_string():
    assert slots.slot_exists("5") is True
    assert slots.label_for_slot("5") == "20:00"

def test_slot_for_unknown_label():
    assert slots.slot_for_label("17:30") is None
    assert slots.slot_for_label("") is None

def test_time_components():
    assert slots.time_components_for_slot(4) == {"hours": 19, "minutes": 30}

def test_all_slots_is_fresh_copy():
    items = slots.all_slots()
    assert len(items) == 9
    items[0]["label"] = "broken"
    items.pop()
    assert slots.all_slots()[0]["label"] == "18:00"
    assert len(slots.all_slots()) == 9

def test_bookable_start_and_span():
    assert slots.MAX_START_SLOT == 7
    assert slots.is_bookable_start(7) is True
    assert slots.is_bookable_start(8) is False
    assert slots.booking_span(5) == [5, 6, 7]

def test_as_date():
    d = date(2025, 6, 1)
    assert slots.as_date(d) == d
    assert slots.as_date(datetime(2025, 6, 1, 23, 59)) == d
    assert slots.as_date("2025-06-01T10:00:00Z") == d
    with pytest.raises(ValueError):
        slots.as_date(None)
