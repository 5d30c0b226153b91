# pharma_ledger/schemas/quality.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QualityCheckCreate(BaseModel):
    location: str = Field(default="", max_length=256)
    temperature: int = Field(..., description="Signed reading, degrees C")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity, percent")
    passed: bool
    remarks: str = ""
    # emptiness is checked by the service so it surfaces as a ledger ValidationError
    evidence_hash: str = Field(..., max_length=256)
    gateway_url: Optional[str] = Field(default=None, max_length=1024)


class QualityCheckOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    idx: int
    inspector: str
    created_at: datetime
    location: str
    temperature: int
    humidity: int
    passed: bool
    remarks: str
    evidence_hash: str
    gateway_url: Optional[str] = None


class QualityCheckPage(BaseModel):
    drug_id: int
    total: int
    offset: int
    limit: int
    items: List[QualityCheckOut]
