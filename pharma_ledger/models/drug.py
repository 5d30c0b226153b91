# pharma_ledger/models/drug.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, Integer, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class Drug(Base):
    """
    One manufactured batch.

    Ids are assigned from the ledger sequencer, never by the database, so a
    rejected manufacture never burns an id. History lives in
    ownership_entries / transfer_records / quality_checks, addressed by
    (drug_id, idx); the *_count columns are the authoritative lengths.
    """

    __tablename__ = "drugs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    batch_number: Mapped[str] = mapped_column(String(128), nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    evidence_hash: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    manufacturer: Mapped[str] = mapped_column(String(128), nullable=False)
    manufactured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    state: Mapped[str] = mapped_column(String(32), nullable=False)
    current_owner: Mapped[str] = mapped_column(String(128), nullable=False)

    ownership_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    transfer_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quality_check_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # optimistic concurrency counter, bumped on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        UniqueConstraint("batch_number", name="uq_drugs_batch_number"),
        Index("ix_drugs_current_owner", "current_owner"),
    )
