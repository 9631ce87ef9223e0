from __future__ import annotations
from datetime import datetime
from enum import Enum

from flask_login import UserMixin
from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db

class Role(str, Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"

class User(UserMixin, db.Model):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(db.String(120))
    phone: Mapped[str | None] = mapped_column(db.String(20))
    # строковое поле, чтобы не зависеть от конкретного типа БД
    role: Mapped[str] = mapped_column(db.String(16), index=True, nullable=False, default=Role.CUSTOMER.value)
    is_active_flag: Mapped[bool] = mapped_column("is_active", db.Boolean, default=True, nullable=False)
    total_reservations: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    # Flask-Login ожидает .is_active
    @property
    def is_active(self):
        return bool(self.is_active_flag)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def __repr__(self):
        return f"<User {self.email}>"
