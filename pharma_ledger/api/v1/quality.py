# pharma_ledger/api/v1/quality.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharma_ledger.core.auth_deps import get_current_caller
from pharma_ledger.db.session import get_db
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.schemas.drugs import CountResponse
from pharma_ledger.schemas.quality import QualityCheckCreate, QualityCheckOut, QualityCheckPage
from pharma_ledger.services.ledger import PharmaLedger, get_ledger

router = APIRouter(prefix="/drugs/{drug_id}/quality-checks")


@router.post("", response_model=QualityCheckOut, status_code=201)
def add_quality_check(
    drug_id: int,
    req: QualityCheckCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.quality.add_quality_check(
        db,
        caller=caller,
        drug_id=drug_id,
        location=req.location,
        temperature=req.temperature,
        humidity=req.humidity,
        passed=req.passed,
        remarks=req.remarks,
        evidence_hash=req.evidence_hash,
        gateway_url=req.gateway_url,
    )


@router.get("", response_model=QualityCheckPage)
def list_quality_checks(
    drug_id: int,
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    page = ledger.quality.page(db, drug_id, offset=offset, limit=limit)
    return QualityCheckPage(
        drug_id=drug_id,
        total=page.total,
        offset=page.offset,
        limit=page.limit,
        items=[QualityCheckOut.model_validate(c) for c in page.items],
    )


@router.get("/count", response_model=CountResponse)
def get_quality_checks_count(
    drug_id: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return CountResponse(drug_id=drug_id, count=ledger.quality.count(db, drug_id))


@router.get("/{index}", response_model=QualityCheckOut)
def get_quality_check_by_index(
    drug_id: int,
    index: int,
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ledger.quality.check_at(db, drug_id, index)
