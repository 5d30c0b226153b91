# pharma_ledger/api/v1/drugs.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharma_ledger.core.auth_deps import get_current_caller
from pharma_ledger.db.session import get_db
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.schemas.drugs import (
    BatchVerification,
    CountResponse,
    DrugBasic,
    DrugManufactureRequest,
    OwnershipEntryOut,
    OwnershipPage,
    RecallRequest,
    StateUpdateRequest,
    TotalDrugsResponse,
    TransferPage,
    TransferRecordOut,
    TransferRequest,
)
from pharma_ledger.services.ledger import PharmaLedger, get_ledger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drugs")


# ─────────────────────────────────────────────────────────────
# READS (open to any caller)
# ─────────────────────────────────────────────────────────────

@router.get("/total", response_model=TotalDrugsResponse)
def total_drugs(
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return TotalDrugsResponse(total=ledger.batches.total_drugs(db))


@router.get("/verify/{batch_number}", response_model=BatchVerification)
def verify_by_batch(
    batch_number: str,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    exists, drug_id = ledger.batches.verify_by_batch(db, batch_number)
    return BatchVerification(exists=exists, drug_id=drug_id)


@router.get("/{drug_id}", response_model=DrugBasic)
def get_drug_basic(
    drug_id: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.batches.get(db, drug_id)


@router.get("/{drug_id}/ownership", response_model=OwnershipPage)
def get_ownership_history(
    drug_id: int,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    page = ledger.provenance.ownership_page(db, drug_id, offset=offset, limit=limit)
    return OwnershipPage(
        drug_id=drug_id,
        total=page.total,
        offset=page.offset,
        limit=page.limit,
        owners=[e.owner for e in page.items],
    )


@router.get("/{drug_id}/ownership/count", response_model=CountResponse)
def get_ownership_count(
    drug_id: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return CountResponse(drug_id=drug_id, count=ledger.provenance.ownership_count(db, drug_id))


@router.get("/{drug_id}/ownership/{index}", response_model=OwnershipEntryOut)
def get_owner_by_index(
    drug_id: int,
    index: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.provenance.owner_at(db, drug_id, index)


@router.get("/{drug_id}/transfers", response_model=TransferPage)
def list_transfers(
    drug_id: int,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    page = ledger.provenance.transfers_page(db, drug_id, offset=offset, limit=limit)
    return TransferPage(
        drug_id=drug_id,
        total=page.total,
        offset=page.offset,
        limit=page.limit,
        items=[TransferRecordOut.model_validate(r) for r in page.items],
    )


@router.get("/{drug_id}/transfers/count", response_model=CountResponse)
def get_transfers_count(
    drug_id: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return CountResponse(drug_id=drug_id, count=ledger.provenance.transfers_count(db, drug_id))


@router.get("/{drug_id}/transfers/{index}", response_model=TransferRecordOut)
def get_transfer_by_index(
    drug_id: int,
    index: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.provenance.transfer_at(db, drug_id, index)


# ─────────────────────────────────────────────────────────────
# MUTATIONS (bearer token required; gated by AccessControlGuard)
# ─────────────────────────────────────────────────────────────

@router.post("", response_model=DrugBasic, status_code=201)
def manufacture_drug(
    req: DrugManufactureRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.batches.manufacture(
        db,
        caller=caller,
        name=req.name,
        batch_number=req.batch_number,
        evidence_hash=req.evidence_hash,
        expiry=req.expiry,
    )


@router.post("/{drug_id}/transfer", response_model=TransferRecordOut)
def transfer_drug(
    drug_id: int,
    req: TransferRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.batches.transfer_custody(db, caller=caller, drug_id=drug_id, to=req.to, note=req.note)


@router.post("/{drug_id}/state", response_model=DrugBasic)
def update_drug_state(
    drug_id: int,
    req: StateUpdateRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.batches.update_state(db, caller=caller, drug_id=drug_id, new_state=req.state)


@router.post("/{drug_id}/recall", response_model=TransferRecordOut)
def recall_drug(
    drug_id: int,
    req: RecallRequest,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.batches.recall(db, caller=caller, drug_id=drug_id, note=req.note)
