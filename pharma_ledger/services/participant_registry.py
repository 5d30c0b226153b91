# pharma_ledger/services/participant_registry.py
from __future__ import annotations

import logging
from typing import Optional, Union

from sqlalchemy.orm import Session

from pharma_ledger.core.addresses import validate_address
from pharma_ledger.core.errors import ConflictError, NotFoundError, ValidationError
from pharma_ledger.core.security import hash_password, verify_password
from pharma_ledger.core.unit_of_work import ledger_transaction
from pharma_ledger.models.enums import LedgerEventType, ParticipantRole
from pharma_ledger.models.participant import Participant
from pharma_ledger.models.participant_credential import ParticipantCredential
from pharma_ledger.policies.access_control import (
    ACTION_ACTIVATE_PARTICIPANT,
    ACTION_DEACTIVATE_PARTICIPANT,
    ACTION_REGISTER_PARTICIPANT,
    ACTION_SET_CREDENTIAL,
    ACTION_UPDATE_PROFILE,
    AccessControlGuard,
    Caller,
)
from pharma_ledger.services.event_service import EventService

logger = logging.getLogger(__name__)


def _coerce_role(role: Union[ParticipantRole, str]) -> ParticipantRole:
    try:
        role_enum = ParticipantRole(role)
    except ValueError:
        raise ValidationError(f"Invalid role {role!r}.")
    if role_enum == ParticipantRole.UNKNOWN:
        raise ValidationError("Role Unknown cannot be registered.")
    return role_enum


class ParticipantRegistry:
    def __init__(self, guard: AccessControlGuard, clock, events: Optional[EventService] = None):
        self.guard = guard
        self.clock = clock
        self.events = events or EventService()

    # ---------------------------
    # READS
    # ---------------------------

    def find(self, db: Session, address: str) -> Optional[Participant]:
        return db.get(Participant, address)

    def get(self, db: Session, address: str) -> Participant:
        p = self.find(db, address)
        if p is None:
            raise NotFoundError(f"Participant {address} is not registered.")
        return p

    def authenticate(self, db: Session, *, address: str, password: str) -> Optional[Participant]:
        """
        Credential check for token issuance. Inactive participants may still
        sign in (they can edit their own profile); the guard gates writes.
        """
        cred = db.get(ParticipantCredential, address)
        if cred is None:
            return None
        if not verify_password(password, cred.password_hash):
            return None
        return self.find(db, address)

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def register(
        self,
        db: Session,
        *,
        caller: Caller,
        address: str,
        name: str,
        location: str,
        role: Union[ParticipantRole, str],
        password: Optional[str] = None,
    ) -> Participant:
        """
        Administrator only. New participants start inactive.
        """
        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, ACTION_REGISTER_PARTICIPANT)

            address = validate_address(address)
            role_enum = _coerce_role(role)
            if self.find(db, address) is not None:
                raise ConflictError(f"Participant {address} is already registered.")

            now = self.clock.now()
            p = Participant(
                address=address,
                name=name,
                location=location,
                role=role_enum.value,
                is_active=False,
                registered_at=now,
                updated_at=now,
            )
            db.add(p)
            db.flush()
            if password:
                db.add(ParticipantCredential(address=address, password_hash=hash_password(password)))

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.PARTICIPANT_REGISTERED,
                actor=caller.address,
                subject=address,
                created_at=now,
                payload={"role": role_enum.value, "name": name, "location": location},
            )

        logger.info("[participants] registered address=%s role=%s", address, role_enum.value)
        return p

    def activate(self, db: Session, *, caller: Caller, address: str) -> Participant:
        return self._set_active(db, caller=caller, address=address, active=True)

    def deactivate(self, db: Session, *, caller: Caller, address: str) -> Participant:
        return self._set_active(db, caller=caller, address=address, active=False)

    def _set_active(self, db: Session, *, caller: Caller, address: str, active: bool) -> Participant:
        action = ACTION_ACTIVATE_PARTICIPANT if active else ACTION_DEACTIVATE_PARTICIPANT
        event_type = (
            LedgerEventType.PARTICIPANT_ACTIVATED if active else LedgerEventType.PARTICIPANT_DEACTIVATED
        )

        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, action)
            p = self.get(db, address)

            now = self.clock.now()
            p.is_active = active
            p.updated_at = now

            self.events.emit(
                db,
                seq,
                event_type=event_type,
                actor=caller.address,
                subject=address,
                created_at=now,
            )

        logger.info("[participants] address=%s active=%s", address, active)
        return p

    def update_profile(self, db: Session, *, caller: Caller, name: str, location: str) -> Participant:
        """
        Self-service: the caller edits their own name/location, active or not.
        """
        with ledger_transaction(db) as seq:
            self.guard.require_action(db, caller, ACTION_UPDATE_PROFILE)
            p = self.get(db, caller.address)

            now = self.clock.now()
            p.name = name
            p.location = location
            p.updated_at = now

            self.events.emit(
                db,
                seq,
                event_type=LedgerEventType.PARTICIPANT_UPDATED,
                actor=caller.address,
                subject=caller.address,
                created_at=now,
                payload={"name": name, "location": location},
            )

        logger.info("[participants] profile updated address=%s", caller.address)
        return p

    def set_credential(self, db: Session, *, caller: Caller, address: str, password: str) -> None:
        with ledger_transaction(db):
            self.guard.require_action(db, caller, ACTION_SET_CREDENTIAL)
            if not password:
                raise ValidationError("password must not be empty.")
            self.get(db, address)

            cred = db.get(ParticipantCredential, address)
            if cred is None:
                db.add(ParticipantCredential(address=address, password_hash=hash_password(password)))
            else:
                cred.password_hash = hash_password(password)

        logger.info("[participants] credential set address=%s", address)
