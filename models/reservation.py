import secrets
import time
import datetime as dt
from datetime import datetime
from enum import Enum

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, JSON, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SEATED = "seated"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


def _reservation_number() -> str:
    stamp = int(time.time() * 1000) % 1_000_000
    return f"RES-{stamp:06d}{secrets.randbelow(1000):03d}"

class Reservation(db.Model):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    reservation_number: Mapped[str] = mapped_column(db.String(20), unique=True, nullable=False, default=_reservation_number)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)  # стартовый слот, занимает slot..slot+2
    guests: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default=ReservationStatus.PENDING.value, index=True)
    table_numbers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    contact_phone: Mapped[str] = mapped_column(db.String(20), nullable=False)
    contact_email: Mapped[str] = mapped_column(db.String(255), nullable=False)
    special_request: Mapped[str | None] = mapped_column(db.String(200))
    occasion: Mapped[str | None] = mapped_column(db.String(20))
    notes: Mapped[str | None] = mapped_column(Text)
    checked_in_at: Mapped[datetime | None] = mapped_column(DateTime)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User")

    __table_args__ = (
        Index("ix_reservation_date_slot", "date", "slot"),
    )

    def __repr__(self):
        return f"<Reservation {self.reservation_number} {self.date} slot={self.slot}>"
