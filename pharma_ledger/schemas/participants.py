# pharma_ledger/schemas/participants.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pharma_ledger.models.enums import ParticipantRole


class ParticipantCreate(BaseModel):
    address: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=256)
    location: str = Field(default="", max_length=256)
    role: ParticipantRole
    password: Optional[str] = Field(default=None, description="Optional initial login credential")


class ParticipantProfileUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    location: str = Field(default="", max_length=256)


class CredentialUpdate(BaseModel):
    password: str = Field(..., min_length=1)


class ParticipantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    address: str
    name: str
    location: str
    role: ParticipantRole
    is_active: bool
    registered_at: datetime
