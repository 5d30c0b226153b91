# pharma_ledger/services/ledger.py
from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from pharma_ledger.core.clock import get_clock
from pharma_ledger.core.config import Settings, get_settings
from pharma_ledger.core.hashing import GENESIS_HASH
from pharma_ledger.core.security import hash_password
from pharma_ledger.models.enums import ParticipantRole
from pharma_ledger.models.ledger_sequencer import LedgerSequencer
from pharma_ledger.models.participant import Participant
from pharma_ledger.models.participant_credential import ParticipantCredential
from pharma_ledger.policies.access_control import AccessControlGuard
from pharma_ledger.services.batch_ledger import BatchLedger
from pharma_ledger.services.event_service import EventService
from pharma_ledger.services.participant_registry import ParticipantRegistry
from pharma_ledger.services.provenance_log import ProvenanceLog
from pharma_ledger.services.quality_audit_trail import QualityAuditTrail

logger = logging.getLogger(__name__)


class PharmaLedger:
    """
    Top-level service object: wires the five ledger components around the
    one shared store. The administrator identity comes from settings.
    """

    def __init__(self, settings: Settings, clock):
        self.settings = settings
        self.clock = clock

        self.guard = AccessControlGuard(settings.admin_address)
        self.events = EventService()
        self.participants = ParticipantRegistry(self.guard, clock, self.events)
        self.provenance = ProvenanceLog(settings.max_page_size)
        self.batches = BatchLedger(self.guard, clock, self.events, self.provenance)
        self.quality = QualityAuditTrail(self.guard, clock, self.events, settings.max_page_size)


def bootstrap_ledger(db: Session, settings: Settings, clock) -> None:
    """
    Idempotent initialization:
    - sequencer row
    - administrator participant (active Regulator)
    - administrator credential, if ADMIN_PASSWORD is configured
    """
    if db.get(LedgerSequencer, LedgerSequencer.SINGLETON_ID) is None:
        db.add(
            LedgerSequencer(
                id=LedgerSequencer.SINGLETON_ID,
                drug_count=0,
                event_seq=0,
                last_event_hash=GENESIS_HASH,
            )
        )
        logger.info("[bootstrap] sequencer created")

    admin = db.get(Participant, settings.admin_address)
    if admin is None:
        now = clock.now()
        db.add(
            Participant(
                address=settings.admin_address,
                name=settings.admin_name,
                location=settings.admin_location,
                role=ParticipantRole.REGULATOR.value,
                is_active=True,
                registered_at=now,
                updated_at=now,
            )
        )
        logger.info("[bootstrap] administrator registered address=%s", settings.admin_address)
        db.flush()

    if settings.admin_password and db.get(ParticipantCredential, settings.admin_address) is None:
        db.add(
            ParticipantCredential(
                address=settings.admin_address,
                password_hash=hash_password(settings.admin_password),
            )
        )

    db.commit()


def get_ledger(
    settings: Settings = Depends(get_settings),
    clock=Depends(get_clock),
) -> PharmaLedger:
    return PharmaLedger(settings, clock)
