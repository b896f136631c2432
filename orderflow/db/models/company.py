from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from orderflow.db.base import Base, UUIDPkMixin, TimestampMixin


class Company(UUIDPkMixin, TimestampMixin, Base):
    """Tenancy root; one per identity-provider account."""
    __tablename__ = "companies"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("app_users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    business_type: Mapped[str] = mapped_column(Text, nullable=False, default="custom_orders")
    inventory_management: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    inventory_type: Mapped[str] = mapped_column(Text, nullable=False, default="finished_products")
    currency: Mapped[str] = mapped_column(Text, nullable=False, default="EUR")
    timezone: Mapped[str] = mapped_column(Text, nullable=False, default="Europe/Paris")
