# pharma_ledger/models/participant.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class Participant(Base):
    __tablename__ = "participants"

    # caller identity key
    address: Mapped[str] = mapped_column(String(128), primary_key=True)

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    location: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(32), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_participants_role_active", "role", "is_active"),
    )
