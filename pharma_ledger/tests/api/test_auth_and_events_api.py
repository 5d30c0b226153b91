from datetime import timedelta

from pharma_ledger.tests.conftest import MANUFACTURER

API = "/api/v1"


def login(client, address, password):
    r = client.post(f"{API}/auth/login", json={"address": address, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def test_admin_logs_in_with_bootstrap_credential(client, settings):
    headers = login(client, settings.admin_address, "admin-pass")

    me = client.get(f"{API}/auth/me", headers=headers).json()
    assert me["address"] == settings.admin_address
    assert me["role"] == "Regulator"
    assert me["is_active"] is True
    assert me["is_administrator"] is True


def test_bad_credentials_are_rejected(client, settings):
    r = client.post(f"{API}/auth/login", json={"address": settings.admin_address, "password": "nope"})
    assert r.status_code == 401
    r = client.post(f"{API}/auth/login", json={"address": "0xnobody", "password": "x"})
    assert r.status_code == 401


def test_participant_credential_flow(client, settings, clock):
    admin = login(client, settings.admin_address, "admin-pass")

    r = client.post(
        f"{API}/participants",
        json={
            "address": MANUFACTURER,
            "name": "Acme",
            "location": "Pune",
            "role": "Manufacturer",
            "password": "first",
        },
        headers=admin,
    )
    assert r.status_code == 201, r.text

    # inactive participants can sign in but cannot manufacture
    mfr = login(client, MANUFACTURER, "first")
    body = {
        "name": "X",
        "batch_number": "LOT-9",
        "expiry": (clock.now() + timedelta(days=10)).isoformat(),
    }
    r = client.post(f"{API}/drugs", json=body, headers=mfr)
    assert r.status_code == 403
    assert r.json()["reason"] == "INACTIVE"

    assert client.post(f"{API}/participants/{MANUFACTURER}/activate", headers=admin).status_code == 200
    assert client.post(f"{API}/drugs", json=body, headers=mfr).status_code == 201

    r = client.put(f"{API}/participants/{MANUFACTURER}/credential", json={"password": "second"}, headers=admin)
    assert r.status_code == 204
    login(client, MANUFACTURER, "second")


def test_event_feed_and_chain_verification(client, settings):
    admin = login(client, settings.admin_address, "admin-pass")
    client.post(
        f"{API}/participants",
        json={"address": MANUFACTURER, "name": "Acme", "location": "Pune", "role": "Manufacturer"},
        headers=admin,
    )
    client.post(f"{API}/participants/{MANUFACTURER}/activate", headers=admin)

    feed = client.get(f"{API}/events", params={"after_seq": 0, "limit": 5}).json()
    assert feed["last_seq"] == 2
    assert [e["event_type"] for e in feed["items"]] == ["ParticipantRegistered", "ParticipantActivated"]
    assert feed["items"][0]["subject"] == MANUFACTURER
    assert feed["items"][0]["payload"]["role"] == "Manufacturer"

    assert client.get(f"{API}/events", params={"after_seq": 2}).json()["items"] == []
    assert client.get(f"{API}/events/verify").json() == {"valid": True, "last_seq": 2}
