# pharma_ledger/models/ledger_sequencer.py
from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class LedgerSequencer(Base):
    """
    Single-row table. Every mutation locks this row (FOR UPDATE) first,
    which gives all writers one global total order.
    """

    __tablename__ = "ledger_sequencer"

    SINGLETON_ID = 1

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    drug_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    event_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_event_hash: Mapped[str] = mapped_column(String(128), nullable=False)
