from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LedgerEventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    seq: int
    event_type: str
    actor: str
    drug_id: Optional[int] = None
    subject: Optional[str] = None
    prev_hash: str
    entry_hash: str
    created_at: datetime
    payload: dict = Field(default_factory=dict)


class LedgerEventFeed(BaseModel):
    after_seq: int
    last_seq: int
    items: List[LedgerEventOut]


class ChainVerification(BaseModel):
    valid: bool
    last_seq: int
