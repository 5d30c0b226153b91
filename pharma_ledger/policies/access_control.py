#pharma_ledger/policies/access_control.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Union

from sqlalchemy.orm import Session

from pharma_ledger.core.errors import AuthorizationError
from pharma_ledger.models.enums import ParticipantRole
from pharma_ledger.models.participant import Participant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Authenticated issuer of an operation (from the bearer token)."""

    address: str


class DenialReason(str, Enum):
    NOT_ADMINISTRATOR = "NOT_ADMINISTRATOR"
    NOT_REGISTERED = "NOT_REGISTERED"
    INACTIVE = "INACTIVE"
    WRONG_ROLE = "WRONG_ROLE"
    NOT_OWNER = "NOT_OWNER"


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    reason: Optional[DenialReason] = None

    @classmethod
    def allow(cls) -> "AuthDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AuthDecision":
        return cls(allowed=False, reason=reason)


# --- Predicates ---

@dataclass(frozen=True)
class IsAdministrator:
    pass


@dataclass(frozen=True)
class IsRegistered:
    pass


@dataclass(frozen=True)
class IsActiveParticipant:
    pass


@dataclass(frozen=True)
class HasActiveRole:
    roles: FrozenSet[ParticipantRole] = field(default_factory=frozenset)


@dataclass(frozen=True)
class IsCurrentOwner:
    owner: str
    allow_administrator: bool = False


Predicate = Union[IsAdministrator, IsRegistered, IsActiveParticipant, HasActiveRole, IsCurrentOwner]


# --- Core action constants ---
ACTION_REGISTER_PARTICIPANT = "REGISTER_PARTICIPANT"
ACTION_ACTIVATE_PARTICIPANT = "ACTIVATE_PARTICIPANT"
ACTION_DEACTIVATE_PARTICIPANT = "DEACTIVATE_PARTICIPANT"
ACTION_SET_CREDENTIAL = "SET_CREDENTIAL"
ACTION_UPDATE_PROFILE = "UPDATE_PROFILE"
ACTION_MANUFACTURE = "MANUFACTURE_DRUG"
ACTION_RECALL = "RECALL_DRUG"
ACTION_ADD_QUALITY_CHECK = "ADD_QUALITY_CHECK"


def required_predicate(action: str) -> Predicate:
    """
    Pure RBAC: the static predicate an action requires.
    Ownership-dependent actions (transfer, state update) build an
    IsCurrentOwner predicate from the batch instead.
    """

    if action in {
        ACTION_REGISTER_PARTICIPANT,
        ACTION_ACTIVATE_PARTICIPANT,
        ACTION_DEACTIVATE_PARTICIPANT,
        ACTION_SET_CREDENTIAL,
        ACTION_RECALL,
    }:
        return IsAdministrator()

    if action == ACTION_UPDATE_PROFILE:
        return IsRegistered()

    if action == ACTION_MANUFACTURE:
        return HasActiveRole(frozenset({ParticipantRole.MANUFACTURER}))

    if action == ACTION_ADD_QUALITY_CHECK:
        return HasActiveRole(
            frozenset({ParticipantRole.QUALITY_INSPECTOR, ParticipantRole.REGULATOR})
        )

    raise KeyError(f"No predicate registered for action {action}.")


class AccessControlGuard:
    """
    Evaluates a caller against the participant registry.
    Never mutates anything; the administrator identity is plain config.
    """

    def __init__(self, admin_address: str):
        self.admin_address = admin_address

    def is_administrator(self, address: str) -> bool:
        return address == self.admin_address

    def evaluate(self, db: Session, caller: Caller, predicate: Predicate) -> AuthDecision:
        if isinstance(predicate, IsAdministrator):
            if self.is_administrator(caller.address):
                return AuthDecision.allow()
            return AuthDecision.deny(DenialReason.NOT_ADMINISTRATOR)

        if isinstance(predicate, IsCurrentOwner):
            if caller.address == predicate.owner:
                return AuthDecision.allow()
            if predicate.allow_administrator and self.is_administrator(caller.address):
                return AuthDecision.allow()
            return AuthDecision.deny(DenialReason.NOT_OWNER)

        participant = db.get(Participant, caller.address)
        if participant is None:
            return AuthDecision.deny(DenialReason.NOT_REGISTERED)

        if isinstance(predicate, IsRegistered):
            return AuthDecision.allow()

        if not participant.is_active:
            return AuthDecision.deny(DenialReason.INACTIVE)

        if isinstance(predicate, HasActiveRole):
            if ParticipantRole(participant.role) not in predicate.roles:
                return AuthDecision.deny(DenialReason.WRONG_ROLE)

        return AuthDecision.allow()

    def require(self, db: Session, caller: Caller, predicate: Predicate, *, action: str) -> None:
        decision = self.evaluate(db, caller, predicate)
        if decision.allowed:
            return

        logger.warning(
            "[guard] denied action=%s caller=%s reason=%s",
            action,
            caller.address,
            decision.reason.value,
        )
        raise AuthorizationError(
            f"Caller {caller.address} not permitted for action {action}.",
            reason=decision.reason.value,
        )

    def require_action(self, db: Session, caller: Caller, action: str) -> None:
        self.require(db, caller, required_predicate(action), action=action)
