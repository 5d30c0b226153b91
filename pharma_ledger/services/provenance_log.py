# pharma_ledger/services/provenance_log.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.core.paging import Page, check_index, check_page
from pharma_ledger.models.drug import Drug
from pharma_ledger.models.enums import TransferKind
from pharma_ledger.models.ownership_entry import OwnershipEntry
from pharma_ledger.models.transfer_record import TransferRecord
from pharma_ledger.services.drug_lookup import load_drug

logger = logging.getLogger(__name__)


class ProvenanceLog:
    """
    Per-batch owner history plus transfer stream.

    Invariant, held after every committed mutation:
        ownership_count == (#CUSTODY transfer records) + 1
        ownership[ownership_count - 1].owner == drug.current_owner

    Append helpers must run inside the caller's ledger_transaction; they
    never commit.
    """

    def __init__(self, max_page_size: int = 100):
        self.max_page_size = max_page_size

    # ─────────────────────────────────────────────
    # APPENDS (called by BatchLedger only)
    # ─────────────────────────────────────────────

    def start(self, db: Session, drug: Drug, *, owner: str, at: datetime) -> OwnershipEntry:
        entry = OwnershipEntry(drug_id=drug.id, idx=0, owner=owner, recorded_at=at)
        db.add(entry)
        drug.ownership_count = 1
        drug.transfer_count = 0
        return entry

    def record_custody_transfer(
        self,
        db: Session,
        drug: Drug,
        *,
        to: str,
        at: datetime,
        note: str,
    ) -> TransferRecord:
        record = TransferRecord(
            drug_id=drug.id,
            idx=drug.transfer_count,
            kind=TransferKind.CUSTODY.value,
            from_address=drug.current_owner,
            to_address=to,
            created_at=at,
            note=note,
        )
        entry = OwnershipEntry(drug_id=drug.id, idx=drug.ownership_count, owner=to, recorded_at=at)
        db.add(record)
        db.add(entry)

        drug.transfer_count += 1
        drug.ownership_count += 1
        drug.current_owner = to
        return record

    def record_recall(self, db: Session, drug: Drug, *, at: datetime, note: str) -> TransferRecord:
        """
        Self-to-self marker on the transfer stream; owner history untouched.
        """
        record = TransferRecord(
            drug_id=drug.id,
            idx=drug.transfer_count,
            kind=TransferKind.RECALL.value,
            from_address=drug.current_owner,
            to_address=drug.current_owner,
            created_at=at,
            note=note,
        )
        db.add(record)
        drug.transfer_count += 1
        return record

    # ─────────────────────────────────────────────
    # READS: count + index + bounded page
    # ─────────────────────────────────────────────

    def ownership_count(self, db: Session, drug_id: int) -> int:
        return load_drug(db, drug_id).ownership_count

    def owner_at(self, db: Session, drug_id: int, index: int) -> OwnershipEntry:
        drug = load_drug(db, drug_id)
        check_index(index, drug.ownership_count, what="Ownership")
        return db.execute(
            select(OwnershipEntry).where(OwnershipEntry.drug_id == drug_id, OwnershipEntry.idx == index)
        ).scalar_one()

    def ownership_page(self, db: Session, drug_id: int, *, offset: int = 0, limit: Optional[int] = None) -> Page[OwnershipEntry]:
        if limit is None:
            limit = self.max_page_size
        check_page(offset, limit, self.max_page_size)
        drug = load_drug(db, drug_id)
        rows = (
            db.execute(
                select(OwnershipEntry)
                .where(OwnershipEntry.drug_id == drug_id, OwnershipEntry.idx >= offset)
                .order_by(OwnershipEntry.idx.asc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return Page(total=drug.ownership_count, offset=offset, limit=limit, items=list(rows))

    def transfers_count(self, db: Session, drug_id: int) -> int:
        return load_drug(db, drug_id).transfer_count

    def transfer_at(self, db: Session, drug_id: int, index: int) -> TransferRecord:
        drug = load_drug(db, drug_id)
        check_index(index, drug.transfer_count, what="Transfer")
        return db.execute(
            select(TransferRecord).where(TransferRecord.drug_id == drug_id, TransferRecord.idx == index)
        ).scalar_one()

    def transfers_page(self, db: Session, drug_id: int, *, offset: int = 0, limit: Optional[int] = None) -> Page[TransferRecord]:
        if limit is None:
            limit = self.max_page_size
        check_page(offset, limit, self.max_page_size)
        drug = load_drug(db, drug_id)
        rows = (
            db.execute(
                select(TransferRecord)
                .where(TransferRecord.drug_id == drug_id, TransferRecord.idx >= offset)
                .order_by(TransferRecord.idx.asc())
                .limit(limit)
            )
            .scalars()
            .all()
        )
        return Page(total=drug.transfer_count, offset=offset, limit=limit, items=list(rows))

    def is_consistent(self, db: Session, drug_id: int) -> bool:
        """
        Checks the parity invariant against the stored rows. Used by audits
        and tests; walks the history in bounded pages.
        """
        drug = load_drug(db, drug_id)

        custody = 0
        offset = 0
        while offset < drug.transfer_count:
            page = self.transfers_page(db, drug_id, offset=offset, limit=self.max_page_size)
            custody += sum(1 for r in page.items if r.kind == TransferKind.CUSTODY.value)
            offset += len(page.items)
            if not page.items:
                return False

        if drug.ownership_count != custody + 1:
            return False

        last = self.owner_at(db, drug_id, drug.ownership_count - 1)
        return last.owner == drug.current_owner
