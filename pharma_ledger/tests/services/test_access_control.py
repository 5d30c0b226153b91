import pytest

from pharma_ledger.core.errors import AuthorizationError
from pharma_ledger.models.enums import ParticipantRole
from pharma_ledger.policies.access_control import (
    ACTION_ADD_QUALITY_CHECK,
    ACTION_MANUFACTURE,
    ACTION_RECALL,
    AuthDecision,
    Caller,
    DenialReason,
    HasActiveRole,
    IsActiveParticipant,
    IsAdministrator,
    IsCurrentOwner,
    IsRegistered,
    required_predicate,
)
from pharma_ledger.tests.conftest import MANUFACTURER, enroll


def test_administrator_is_bootstrapped_as_active_regulator(db, ledger, settings):
    p = ledger.participants.get(db, settings.admin_address)
    assert p.role == ParticipantRole.REGULATOR.value
    assert p.is_active is True
    assert ledger.guard.is_administrator(settings.admin_address)


def test_is_administrator_predicate(db, ledger, admin):
    assert ledger.guard.evaluate(db, admin, IsAdministrator()) == AuthDecision.allow()

    decision = ledger.guard.evaluate(db, Caller("0xnobody"), IsAdministrator())
    assert decision.allowed is False
    assert decision.reason == DenialReason.NOT_ADMINISTRATOR


def test_unregistered_caller_is_denied(db, ledger):
    decision = ledger.guard.evaluate(db, Caller("0xnobody"), IsActiveParticipant())
    assert decision.reason == DenialReason.NOT_REGISTERED


def test_inactive_participant_is_registered_but_not_active(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER, activate=False)

    assert ledger.guard.evaluate(db, caller, IsRegistered()).allowed is True
    decision = ledger.guard.evaluate(db, caller, IsActiveParticipant())
    assert decision.reason == DenialReason.INACTIVE


def test_wrong_role_is_denied(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER)

    ok = ledger.guard.evaluate(db, caller, HasActiveRole(frozenset({ParticipantRole.MANUFACTURER})))
    assert ok.allowed is True

    denied = ledger.guard.evaluate(db, caller, HasActiveRole(frozenset({ParticipantRole.PHARMACY})))
    assert denied.reason == DenialReason.WRONG_ROLE


def test_current_owner_predicate_with_admin_override(db, ledger, admin):
    owner_only = IsCurrentOwner(owner=MANUFACTURER)
    owner_or_admin = IsCurrentOwner(owner=MANUFACTURER, allow_administrator=True)

    assert ledger.guard.evaluate(db, Caller(MANUFACTURER), owner_only).allowed is True
    assert ledger.guard.evaluate(db, admin, owner_only).reason == DenialReason.NOT_OWNER
    assert ledger.guard.evaluate(db, admin, owner_or_admin).allowed is True


def test_require_raises_typed_error_with_reason(db, ledger):
    with pytest.raises(AuthorizationError) as exc:
        ledger.guard.require_action(db, Caller("0xnobody"), ACTION_RECALL)
    assert exc.value.reason == DenialReason.NOT_ADMINISTRATOR.value


def test_required_predicates_table():
    assert required_predicate(ACTION_RECALL) == IsAdministrator()
    assert required_predicate(ACTION_MANUFACTURE) == HasActiveRole(frozenset({ParticipantRole.MANUFACTURER}))
    assert required_predicate(ACTION_ADD_QUALITY_CHECK).roles == frozenset(
        {ParticipantRole.QUALITY_INSPECTOR, ParticipantRole.REGULATOR}
    )
    with pytest.raises(KeyError):
        required_predicate("FLY_TO_MOON")
