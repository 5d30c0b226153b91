# pharma_ledger/services/quality_audit_trail.py
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.core.errors import ValidationError
from pharma_ledger.core.paging import Page, check_index, check_page
from pharma_ledger.core.unit_of_work import ledger_transaction
from pharma_ledger.models.enums import LedgerEventType
from pharma_ledger.models.quality_check import QualityCheck
from pharma_ledger.policies.access_control import (
    ACTION_ADD_QUALITY_CHECK,
    AccessControlGuard,
    Caller,
)
from pharma_ledger.services.drug_lookup import load_drug
from pharma_ledger.services.event_service import EventService

logger = logging.getLogger(__name__)

MIN_HUMIDITY = 0
MAX_HUMIDITY = 100


class QualityAuditTrail:
    """
    Append-only inspection records per batch.

    Each record must point at externally stored evidence through a content
    hash; the content itself is never fetched or checked here. Readings are
    recorded as given, with no compliance thresholds applied.
    """

    def __init__(
        self,
        guard: AccessControlGuard,
        clock,
        events: Optional[EventService] = None,
        max_page_size: int = 100,
    ):
        self.guard = guard
        self.clock = clock
        self.events = events or EventService()
        self.max_page_size = max_page_size

    def add_quality_check(
        self,
        db: Session,
        *,
        caller: Caller,
        drug_id: int,
        location: str,
        temperature: int,
        humidity: int,
        passed: bool,
        remarks: str,
        evidence_hash: str,
        gateway_url: Optional[str] = None,
    ) -> QualityCheck:
        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, ACTION_ADD_QUALITY_CHECK)
            drug = load_drug(db, drug_id, for_update=True)

            evidence_hash = (evidence_hash or "").strip()
            if not evidence_hash:
                raise ValidationError("evidence_hash is required for a quality check.")
            if humidity < MIN_HUMIDITY or humidity > MAX_HUMIDITY:
                raise ValidationError(f"humidity must be between {MIN_HUMIDITY} and {MAX_HUMIDITY}.")

            now = self.clock.now()
            check = QualityCheck(
                drug_id=drug_id,
                idx=drug.quality_check_count,
                inspector=caller.address,
                created_at=now,
                location=location,
                temperature=temperature,
                humidity=humidity,
                passed=passed,
                remarks=remarks,
                evidence_hash=evidence_hash,
                gateway_url=gateway_url or None,
            )
            db.add(check)
            drug.quality_check_count += 1

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.QUALITY_CHECK_ADDED,
                actor=caller.address,
                drug_id=drug_id,
                created_at=now,
                payload={
                    "index": check.idx,
                    "passed": passed,
                    "evidence_hash": evidence_hash,
                },
            )

        logger.info(
            "[quality] drug=%d check=%d inspector=%s passed=%s",
            drug_id,
            check.idx,
            caller.address,
            passed,
        )
        return check

    # ---------------------------
    # READS
    # ---------------------------

    def count(self, db: Session, drug_id: int) -> int:
        return load_drug(db, drug_id).quality_check_count

    def check_at(self, db: Session, drug_id: int, index: int) -> QualityCheck:
        drug = load_drug(db, drug_id)
        check_index(index, drug.quality_check_count, what="Quality check")
        return db.execute(
            select(QualityCheck).where(QualityCheck.drug_id == drug_id, QualityCheck.idx == index)
        ).scalar_one()

    def page(self, db: Session, drug_id: int, *, offset: int = 0, limit: Optional[int] = None) -> Page[QualityCheck]:
        if limit is None:
            limit = self.max_page_size
        check_page(offset, limit, self.max_page_size)
        drug = load_drug(db, drug_id)
        rows = (
            db.execute(
                select(QualityCheck)
                .where(QualityCheck.drug_id == drug_id, QualityCheck.idx >= offset)
                .order_by(QualityCheck.idx.asc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return Page(total=drug.quality_check_count, offset=offset, limit=limit, items=list(rows))
