# pharma_ledger/models/transfer_record.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class TransferRecord(Base):
    """
    Immutable transfer stream of one batch.

    kind=CUSTODY rows mirror ownership_entries one-to-one;
    kind=RECALL rows are self-to-self markers on the same stream.
    """

    __tablename__ = "transfer_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    drug_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("drugs.id", ondelete="RESTRICT"), nullable=False
    )
    idx: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)

    from_address: Mapped[str] = mapped_column(String(128), nullable=False)
    to_address: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("drug_id", "idx", name="uq_transfer_records_drug_idx"),
    )
