# pharma_ledger/api/v1/participants.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from pharma_ledger.core.auth_deps import get_current_caller
from pharma_ledger.db.session import get_db
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.schemas.participants import (
    CredentialUpdate,
    ParticipantCreate,
    ParticipantOut,
    ParticipantProfileUpdate,
)
from pharma_ledger.services.ledger import PharmaLedger, get_ledger

router = APIRouter(prefix="/participants")


@router.post("", response_model=ParticipantOut, status_code=201)
def register_participant(
    req: ParticipantCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.participants.register(
        db,
        caller=caller,
        address=req.address,
        name=req.name,
        location=req.location,
        role=req.role,
        password=req.password,
    )


@router.patch("/me", response_model=ParticipantOut)
def update_participant_info(
    req: ParticipantProfileUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.participants.update_profile(db, caller=caller, name=req.name, location=req.location)


@router.post("/{address}/activate", response_model=ParticipantOut)
def activate_participant(
    address: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.participants.activate(db, caller=caller, address=address)


@router.post("/{address}/deactivate", response_model=ParticipantOut)
def deactivate_participant(
    address: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.participants.deactivate(db, caller=caller, address=address)


@router.put("/{address}/credential", status_code=204)
def set_participant_credential(
    address: str,
    req: CredentialUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    ledger.participants.set_credential(db, caller=caller, address=address, password=req.password)
    return Response(status_code=204)


@router.get("/{address}", response_model=ParticipantOut)
def get_participant(
    address: str,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.participants.get(db, address)
