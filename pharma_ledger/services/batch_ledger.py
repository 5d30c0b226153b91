# pharma_ledger/services/batch_ledger.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Tuple, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_ledger.core.addresses import validate_address
from pharma_ledger.core.clock import ensure_utc
from pharma_ledger.core.errors import ConflictError, ValidationError
from pharma_ledger.core.unit_of_work import ledger_transaction
from pharma_ledger.models.drug import Drug
from pharma_ledger.models.enums import DrugState, LedgerEventType
from pharma_ledger.models.ledger_sequencer import LedgerSequencer
from pharma_ledger.models.transfer_record import TransferRecord
from pharma_ledger.policies.access_control import (
    ACTION_MANUFACTURE,
    ACTION_RECALL,
    AccessControlGuard,
    Caller,
    IsActiveParticipant,
    IsCurrentOwner,
)
from pharma_ledger.services.drug_lookup import load_drug
from pharma_ledger.services.event_service import EventService
from pharma_ledger.services.provenance_log import ProvenanceLog

logger = logging.getLogger(__name__)


def _coerce_state(state: Union[DrugState, str]) -> DrugState:
    try:
        return DrugState(state)
    except ValueError:
        raise ValidationError(f"Invalid drug state {state!r}.")


class BatchLedger:
    """
    Drug batch records and their lifecycle state.

    Custody (who holds the batch) and state (which stage it is at) are
    independent: transfers never touch state, state updates never touch
    custody. update_state accepts any DrugState, backwards moves included.
    """

    def __init__(
        self,
        guard: AccessControlGuard,
        clock,
        events: Optional[EventService] = None,
        provenance: Optional[ProvenanceLog] = None,
    ):
        self.guard = guard
        self.clock = clock
        self.events = events or EventService()
        self.provenance = provenance or ProvenanceLog()

    # ---------------------------
    # READS
    # ---------------------------

    def get(self, db: Session, drug_id: int) -> Drug:
        return load_drug(db, drug_id)

    def verify_by_batch(self, db: Session, batch_number: str) -> Tuple[bool, int]:
        """
        Resolve a batch number to its drug id. (False, 0) when unknown.
        """
        drug_id = db.execute(
            select(Drug.id).where(Drug.batch_number == batch_number)
        ).scalar_one_or_none()
        if drug_id is None:
            return False, 0
        return True, drug_id

    def total_drugs(self, db: Session) -> int:
        return db.execute(
            select(LedgerSequencer.drug_count).where(LedgerSequencer.id == LedgerSequencer.SINGLETON_ID)
        ).scalar_one_or_none() or 0

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def manufacture(
        self,
        db: Session,
        *,
        caller: Caller,
        name: str,
        batch_number: str,
        evidence_hash: Optional[str],
        expiry: datetime,
    ) -> Drug:
        """
        Rules:
        - caller must be an active Manufacturer
        - batch number must be new
        - expiry must be strictly after now
        - id = previous id + 1, taken from the sequencer only once all
          checks have passed
        """
        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, ACTION_MANUFACTURE)

            # stored exactly as given; verify_by_batch matches it verbatim
            if not (batch_number or "").strip():
                raise ValidationError("batch_number must not be empty.")

            exists, existing_id = self.verify_by_batch(db, batch_number)
            if exists:
                raise ConflictError(f"Batch {batch_number} already registered as drug {existing_id}.")

            now = self.clock.now()
            expiry = ensure_utc(expiry)
            if expiry <= now:
                raise ValidationError("Expiry must be in the future.")

            drug_id = seq.drug_count + 1
            drug = Drug(
                id=drug_id,
                batch_number=batch_number,
                name=name,
                evidence_hash=evidence_hash or None,
                manufacturer=caller.address,
                manufactured_at=now,
                expires_at=expiry,
                state=DrugState.MANUFACTURED.value,
                current_owner=caller.address,
            )
            db.add(drug)
            # drug row must exist before its history rows reference it
            db.flush()
            self.provenance.start(db, drug, owner=caller.address, at=now)
            seq.drug_count = drug_id

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.DRUG_MANUFACTURED,
                actor=caller.address,
                drug_id=drug_id,
                created_at=now,
                payload={
                    "batch_number": batch_number,
                    "name": name,
                    "evidence_hash": evidence_hash or None,
                    "expires_at": expiry.isoformat(),
                },
            )

        logger.info("[batches] manufactured drug=%d batch=%s by=%s", drug_id, batch_number, caller.address)
        return drug

    def transfer_custody(
        self,
        db: Session,
        *,
        caller: Caller,
        drug_id: int,
        to: str,
        note: str = "",
    ) -> TransferRecord:
        with ledger_transaction(db) as seq:
            drug = load_drug(db, drug_id, for_update=True)
            self.guard.require(
                db, caller, IsCurrentOwner(owner=drug.current_owner), action="TRANSFER_DRUG"
            )

            to = validate_address(to, field="to")
            recipient = Caller(address=to)
            decision = self.guard.evaluate(db, recipient, IsActiveParticipant())
            if not decision.allowed:
                raise ValidationError(
                    f"Recipient {to} must be a registered, active participant.",
                    reason=decision.reason.value,
                )

            now = self.clock.now()
            from_address = drug.current_owner
            record = self.provenance.record_custody_transfer(db, drug, to=to, at=now, note=note)

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.CUSTODY_TRANSFERRED,
                actor=caller.address,
                drug_id=drug_id,
                subject=to,
                created_at=now,
                payload={"from": from_address, "to": to, "note": note},
            )

        logger.info("[batches] transfer drug=%d %s -> %s", drug_id, from_address, to)
        return record

    def update_state(
        self,
        db: Session,
        *,
        caller: Caller,
        drug_id: int,
        new_state: Union[DrugState, str],
    ) -> Drug:
        """
        Owner or administrator sets any state; no transition table is applied.
        """
        with ledger_transaction(db) as seq:
            drug = load_drug(db, drug_id, for_update=True)
            self.guard.require(
                db,
                caller,
                IsCurrentOwner(owner=drug.current_owner, allow_administrator=True),
                action="UPDATE_DRUG_STATE",
            )
            state = _coerce_state(new_state)

            now = self.clock.now()
            old_state = drug.state
            drug.state = state.value

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.STATE_CHANGED,
                actor=caller.address,
                drug_id=drug_id,
                created_at=now,
                payload={"old_state": old_state, "new_state": state.value},
            )

        logger.info("[batches] state drug=%d %s -> %s", drug_id, old_state, state.value)
        return drug

    def recall(self, db: Session, *, caller: Caller, drug_id: int, note: str = "") -> TransferRecord:
        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, ACTION_RECALL)
            drug = load_drug(db, drug_id, for_update=True)

            now = self.clock.now()
            old_state = drug.state
            drug.state = DrugState.RECALLED.value
            record = self.provenance.record_recall(db, drug, at=now, note=note)

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.DRUG_RECALLED,
                actor=caller.address,
                drug_id=drug_id,
                subject=drug.current_owner,
                created_at=now,
                payload={"old_state": old_state, "note": note},
            )

        logger.warning("[batches] recalled drug=%d note=%s", drug_id, note)
        return record
