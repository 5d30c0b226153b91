#  pharma_ledger/models/participant_credential.py
from __future__ import annotations

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from pharma_ledger.db.base import Base


class ParticipantCredential(Base):
    __tablename__ = "participant_credentials"

    address: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("participants.address", ondelete="CASCADE"),
        primary_key=True,
    )

    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
