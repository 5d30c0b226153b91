from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from pharma_ledger.db.session import get_db
from pharma_ledger.schemas.events import ChainVerification, LedgerEventFeed, LedgerEventOut
from pharma_ledger.services.ledger import PharmaLedger, get_ledger

router = APIRouter(prefix="/events")


def _event_to_schema(e) -> LedgerEventOut:
    return LedgerEventOut(
        seq=e.seq,
        event_type=e.event_type,
        actor=e.actor,
        drug_id=e.drug_id,
        subject=e.subject,
        prev_hash=e.prev_hash,
        entry_hash=e.entry_hash,
        created_at=e.created_at,
        payload=e.payload_json.get("payload", {}),
    )


@router.get("", response_model=LedgerEventFeed)
def list_events(
    after_seq: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    """
    Notification feed for off-ledger indexers, read in seq order.
    """
    max_page_size = ledger.settings.max_page_size
    page = ledger.events.list_events(
        db, after_seq=after_seq, limit=max_page_size if limit is None else limit, max_page_size=max_page_size
    )
    return LedgerEventFeed(
        after_seq=after_seq,
        last_seq=page.total,
        items=[_event_to_schema(e) for e in page.items],
    )


@router.get("/verify", response_model=ChainVerification)
def verify_event_chain(
    db: Session = Depends(get_db),
    ledger: PharmaLedger = Depends(get_ledger),
):
    return ChainVerification(valid=ledger.events.verify_chain(db), last_seq=ledger.events.last_seq(db))
