# pharma_ledger/models/quality_check.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, String, DateTime, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class QualityCheck(Base):
    """
    Inspection record (append-only). The evidence itself lives in an
    external content-addressed store; only its hash is kept here.
    """

    __tablename__ = "quality_checks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    drug_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("drugs.id", ondelete="RESTRICT"), nullable=False
    )
    idx: Mapped[int] = mapped_column(Integer, nullable=False)

    inspector: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    location: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    temperature: Mapped[int] = mapped_column(Integer, nullable=False)  # signed, degrees C
    humidity: Mapped[int] = mapped_column(Integer, nullable=False)  # percent
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    remarks: Mapped[str] = mapped_column(Text, nullable=False, default="")

    evidence_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    gateway_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    __table_args__ = (
        UniqueConstraint("drug_id", "idx", name="uq_quality_checks_drug_idx"),
    )
