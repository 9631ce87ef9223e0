from extensions import db

from .user import Role, User
from .table import RestaurantTable, TableBooking
from .reservation import Reservation, ReservationStatus
from .audit import AuditLog

__all__ = [
    "db",
    "Role", "User",
    "RestaurantTable", "TableBooking",
    "Reservation", "ReservationStatus",
    "AuditLog",
]
