from __future__ import annotations

from sqlalchemy import Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column

from orderflow.db.base import Base, UUIDPkMixin, TimestampMixin


class AppUser(UUIDPkMixin, TimestampMixin, Base):
    """Account held by the identity provider; owns at most one company."""
    __tablename__ = "app_users"

    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
