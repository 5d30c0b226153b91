from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from pharma_ledger.db.session import get_db
from pharma_ledger.models.ledger_sequencer import LedgerSequencer

router = APIRouter()


@router.get("/health")
def health(request: Request, db: Session = Depends(get_db)):
    """
    Liveness plus a ledger readiness flag (sequencer row bootstrapped).
    """
    rid = getattr(request.state, "request_id", None)
    ready = db.get(LedgerSequencer, LedgerSequencer.SINGLETON_ID) is not None
    return {"status": "ok", "ledger_ready": ready, "request_id": rid}
