# pharma_ledger/models/ownership_entry.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class OwnershipEntry(Base):
    """
    Append-only owner history of one batch. idx is dense, starting at 0
    (the manufacturer).
    """

    __tablename__ = "ownership_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    drug_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("drugs.id", ondelete="RESTRICT"), nullable=False
    )
    idx: Mapped[int] = mapped_column(Integer, nullable=False)

    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("drug_id", "idx", name="uq_ownership_entries_drug_idx"),
    )
