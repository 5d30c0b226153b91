import pytest

from pharma_ledger.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from pharma_ledger.models.enums import LedgerEventType, ParticipantRole
from pharma_ledger.models.ledger_event import LedgerEvent
from pharma_ledger.policies.access_control import Caller
from pharma_ledger.tests.conftest import DISTRIBUTOR, MANUFACTURER, enroll


def test_register_starts_inactive(db, ledger, admin):
    p = ledger.participants.register(
        db,
        caller=admin,
        address=MANUFACTURER,
        name="Acme Pharma",
        location="Pune",
        role=ParticipantRole.MANUFACTURER,
    )

    assert p.address == MANUFACTURER
    assert p.role == ParticipantRole.MANUFACTURER.value
    assert p.is_active is False


def test_register_is_administrator_only(db, ledger, admin):
    outsider = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER)

    with pytest.raises(AuthorizationError):
        ledger.participants.register(
            db, caller=outsider, address=DISTRIBUTOR, name="D", location="X", role=ParticipantRole.DISTRIBUTOR
        )
    assert ledger.participants.find(db, DISTRIBUTOR) is None


def test_register_rejects_unknown_role(db, ledger, admin):
    with pytest.raises(ValidationError):
        ledger.participants.register(
            db, caller=admin, address=MANUFACTURER, name="M", location="X", role=ParticipantRole.UNKNOWN
        )
    with pytest.raises(ValidationError):
        ledger.participants.register(db, caller=admin, address=MANUFACTURER, name="M", location="X", role="Pirate")
    assert ledger.participants.find(db, MANUFACTURER) is None


@pytest.mark.parametrize("address", ["", "   ", "0x0000000000000000000000000000000000000000", "0"])
def test_register_rejects_empty_or_zero_address(db, ledger, admin, address):
    with pytest.raises(ValidationError):
        ledger.participants.register(
            db, caller=admin, address=address, name="M", location="X", role=ParticipantRole.CONSUMER
        )


def test_register_twice_conflicts(db, ledger, admin):
    enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER, name="First")

    with pytest.raises(ConflictError):
        ledger.participants.register(
            db, caller=admin, address=MANUFACTURER, name="Second", location="X", role=ParticipantRole.PHARMACY
        )
    p = ledger.participants.get(db, MANUFACTURER)
    assert p.name == "First"
    assert p.role == ParticipantRole.MANUFACTURER.value


def test_activate_and_deactivate(db, ledger, admin):
    enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER, activate=False)

    assert ledger.participants.activate(db, caller=admin, address=MANUFACTURER).is_active is True
    assert ledger.participants.deactivate(db, caller=admin, address=MANUFACTURER).is_active is False


def test_activate_unregistered_is_not_found(db, ledger, admin):
    with pytest.raises(NotFoundError):
        ledger.participants.activate(db, caller=admin, address=MANUFACTURER)


def test_only_administrator_activates(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER, activate=False)

    with pytest.raises(AuthorizationError):
        ledger.participants.activate(db, caller=caller, address=MANUFACTURER)
    assert ledger.participants.get(db, MANUFACTURER).is_active is False


def test_update_profile_allowed_while_inactive(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER, activate=False)

    p = ledger.participants.update_profile(db, caller=caller, name="Acme Labs", location="Mumbai")
    assert p.name == "Acme Labs"
    assert p.location == "Mumbai"
    assert p.is_active is False


def test_update_profile_requires_registration(db, ledger):
    with pytest.raises(AuthorizationError) as exc:
        ledger.participants.update_profile(db, caller=Caller("0xnobody"), name="N", location="L")
    assert exc.value.reason == "NOT_REGISTERED"


def test_get_unregistered_is_not_found(db, ledger):
    with pytest.raises(NotFoundError):
        ledger.participants.get(db, "0xnobody")


def test_registration_and_activation_emit_events(db, ledger, admin):
    enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER)

    types = [e.event_type for e in db.query(LedgerEvent).order_by(LedgerEvent.seq).all()]
    assert types == [
        LedgerEventType.PARTICIPANT_REGISTERED.value,
        LedgerEventType.PARTICIPANT_ACTIVATED.value,
    ]


def test_credentials_and_authenticate(db, ledger, admin):
    ledger.participants.register(
        db,
        caller=admin,
        address=MANUFACTURER,
        name="M",
        location="X",
        role=ParticipantRole.MANUFACTURER,
        password="s3cret",
    )

    assert ledger.participants.authenticate(db, address=MANUFACTURER, password="s3cret").address == MANUFACTURER
    assert ledger.participants.authenticate(db, address=MANUFACTURER, password="wrong") is None

    ledger.participants.set_credential(db, caller=admin, address=MANUFACTURER, password="rotated")
    assert ledger.participants.authenticate(db, address=MANUFACTURER, password="s3cret") is None
    assert ledger.participants.authenticate(db, address=MANUFACTURER, password="rotated") is not None


def test_set_credential_is_administrator_only(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER)

    with pytest.raises(AuthorizationError):
        ledger.participants.set_credential(db, caller=caller, address=MANUFACTURER, password="mine")


def test_set_credential_checks_caller_before_password(db, ledger, admin):
    caller = enroll(db, ledger, admin, MANUFACTURER, ParticipantRole.MANUFACTURER)

    with pytest.raises(AuthorizationError) as exc:
        ledger.participants.set_credential(db, caller=caller, address=MANUFACTURER, password="")
    assert exc.value.reason == "NOT_ADMINISTRATOR"

    with pytest.raises(ValidationError):
        ledger.participants.set_credential(db, caller=admin, address=MANUFACTURER, password="")
