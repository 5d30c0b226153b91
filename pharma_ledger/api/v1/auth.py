#pharma_ledger/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pharma_ledger.core.auth_deps import get_current_caller
from pharma_ledger.core.security import create_access_token
from pharma_ledger.db.session import get_db
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.schemas.auth import LoginRequest, TokenResponse
from pharma_ledger.services.ledger import PharmaLedger, get_ledger

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=TokenResponse)
def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    participant = ledger.participants.authenticate(db, address=req.address, password=req.password)
    if not participant:
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    token = create_access_token(participant.address, role=participant.role)
    return TokenResponse(access_token=token)


@router.get("/me")
def get_me(
    caller: Caller = Depends(get_current_caller),
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    p = ledger.participants.find(db, caller.address)
    return {
        "address": caller.address,
        "registered": p is not None,
        "role": p.role if p else None,
        "is_active": bool(p.is_active) if p else False,
        "is_administrator": ledger.guard.is_administrator(caller.address),
    }
