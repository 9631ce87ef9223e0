import datetime as dt
from datetime import datetime

from sqlalchemy import (
    Boolean, Date, DateTime, ForeignKey, Index, Integer, JSON, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

class RestaurantTable(db.Model):
    __tablename__ = "restaurant_tables"

    id: Mapped[int] = mapped_column(primary_key=True)
    table_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)  # 1..22
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=4)                   # 1..12
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(db.String(200))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # по одной строке на дату, где есть хоть один занятый слот
    bookings: Mapped[list["TableBooking"]] = relationship(
        back_populates="table",
        order_by="TableBooking.date",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<RestaurantTable {self.table_number}>"


class TableBooking(db.Model):
    """Занятые слоты одного стола на одну дату."""
    __tablename__ = "table_bookings"

    id: Mapped[int] = mapped_column(primary_key=True)
    table_id: Mapped[int] = mapped_column(ForeignKey("restaurant_tables.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    booked_slots: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # UPDATE/DELETE идут с WHERE version = ?, параллельная запись даёт StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    table: Mapped[RestaurantTable] = relationship(back_populates="bookings")

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        UniqueConstraint("table_id", "date", name="uq_table_booking_table_date"),
        Index("ix_table_booking_date", "date"),
    )
