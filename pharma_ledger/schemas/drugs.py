# pharma_ledger/schemas/drugs.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pharma_ledger.models.enums import DrugState, TransferKind


class DrugManufactureRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    batch_number: str = Field(..., min_length=1, max_length=128)
    evidence_hash: Optional[str] = Field(default=None, max_length=256)
    expiry: datetime


class TransferRequest(BaseModel):
    to: str = Field(..., max_length=128)
    note: str = ""


class StateUpdateRequest(BaseModel):
    state: DrugState


class RecallRequest(BaseModel):
    note: str = ""


class DrugBasic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    batch_number: str
    name: str
    evidence_hash: Optional[str] = None
    manufacturer: str
    manufactured_at: datetime
    expires_at: datetime
    state: DrugState
    current_owner: str


class BatchVerification(BaseModel):
    exists: bool
    drug_id: int


class CountResponse(BaseModel):
    drug_id: int
    count: int


class TotalDrugsResponse(BaseModel):
    total: int


class OwnershipEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    idx: int
    owner: str
    recorded_at: datetime


class TransferRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    idx: int
    kind: TransferKind
    from_address: str
    to_address: str
    created_at: datetime
    note: str


class OwnershipPage(BaseModel):
    drug_id: int
    total: int
    offset: int
    limit: int
    owners: List[str]


class TransferPage(BaseModel):
    drug_id: int
    total: int
    offset: int
    limit: int
    items: List[TransferRecordOut]
