#pharma_ledger/services/event_service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.core.hashing import GENESIS_HASH, chain_hash, link_is_valid
from pharma_ledger.core.paging import Page, check_page
from pharma_ledger.models.enums import LedgerEventType
from pharma_ledger.models.ledger_event import LedgerEvent
from pharma_ledger.models.ledger_sequencer import LedgerSequencer

logger = logging.getLogger(__name__)


class EventService:
    """
    Append-only notification stream.
    Events are written inside the mutation's own transaction and are never
    read back by the ledger itself.
    """

    GENESIS_HASH = GENESIS_HASH

    # ─────────────────────────────────────────────
    # PUBLIC API
    # ─────────────────────────────────────────────

    def emit(
        self,
        db: Session,
        seq: LedgerSequencer,
        *,
        event_type: LedgerEventType,
        actor: str,
        created_at: datetime,
        drug_id: Optional[int] = None,
        subject: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> LedgerEvent:
        """
        Append a single immutable event, chained to the previous one.
        `seq` must be the sequencer row locked by the current transaction.
        """
        next_seq = seq.event_seq + 1
        prev_hash = seq.last_event_hash

        entry_payload = {
            "seq": next_seq,
            "event_type": event_type.value,
            "actor": actor,
            "drug_id": drug_id,
            "subject": subject,
            "payload": payload or {},
            "created_at": created_at.isoformat(),
        }

        entry_hash = chain_hash(prev_hash, entry_payload)

        row = LedgerEvent(
            seq=next_seq,
            event_type=event_type.value,
            actor=actor,
            drug_id=drug_id,
            subject=subject,
            prev_hash=prev_hash,
            entry_hash=entry_hash,
            created_at=created_at,
            payload_json=entry_payload,
        )
        db.add(row)

        seq.event_seq = next_seq
        seq.last_event_hash = entry_hash

        logger.info(
            "[events] %s seq=%d actor=%s drug=%s subject=%s",
            event_type.value,
            next_seq,
            actor,
            drug_id,
            subject,
        )
        return row

    # ─────────────────────────────────────────────
    # READ-ONLY HELPERS (INDEXERS / AUDIT)
    # ─────────────────────────────────────────────

    def list_events(
        self,
        db: Session,
        *,
        after_seq: int,
        limit: int,
        max_page_size: int,
    ) -> Page[LedgerEvent]:
        check_page(after_seq, limit, max_page_size)
        rows = (
            db.execute(
                select(LedgerEvent)
                .where(LedgerEvent.seq > after_seq)
                .order_by(LedgerEvent.seq.asc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return Page(total=self.last_seq(db), offset=after_seq, limit=limit, items=list(rows))

    def last_seq(self, db: Session) -> int:
        return db.execute(
            select(LedgerSequencer.event_seq).where(LedgerSequencer.id == LedgerSequencer.SINGLETON_ID)
        ).scalar_one_or_none() or 0

    def verify_chain(self, db: Session, *, batch_size: int = 500) -> bool:
        """
        Recomputes the whole hash chain, reading it in bounded batches.
        """
        prev_hash = self.GENESIS_HASH
        after = 0

        while True:
            batch = (
                db.execute(
                    select(LedgerEvent)
                    .where(LedgerEvent.seq > after)
                    .order_by(LedgerEvent.seq.asc())
                    .limit(batch_size)
                )
                .scalars()
                .all()
            )
            if not batch:
                return True

            for e in batch:
                if e.prev_hash != prev_hash:
                    return False
                if not link_is_valid(prev_hash, e.payload_json, e.entry_hash):
                    return False
                prev_hash = e.entry_hash
                after = e.seq
