from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .timing import can_create_or_modify_target, can_modify_existing


@dataclass
class UpdateValidation:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def validate_update(reservation, change: dict, now: datetime) -> UpdateValidation:
    """Можно ли перенести бронь на change['date'] / change['slot'].

    Порядок ошибок важен: наружу отдаём errors[0]. Если исходную бронь уже
    трогать поздно, новое время не проверяем.
    """
    errors: List[str] = []

    current = can_modify_existing(reservation.date, reservation.slot, now)
    if not current.allowed:
        errors.append(current.message)
        return UpdateValidation(is_valid=False, errors=errors)

    new_date = change.get("date")
    new_slot = change.get("slot")
    if new_date or new_slot:
        target = can_create_or_modify_target(
            new_date or reservation.date,
            new_slot or reservation.slot,
            now,
        )
        if not target.allowed:
            errors.append(target.message)

    return UpdateValidation(is_valid=not errors, errors=errors)
