"""Integration test for the issue, request, verify and audit flow via API"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from mediguard.api.app import create_app
from mediguard.api.dependencies import DependencyContainer, set_container
from mediguard.config import create_test_config
from mediguard.domain import FixedClock, decode

PROVIDER_ID = "apollo-andheri"


@pytest.fixture
def fixed_clock():
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def client(fixed_clock):
    """Create test client with fresh dependency container"""
    container = DependencyContainer(config=create_test_config(), clock=fixed_clock)
    set_container(container)

    with TestClient(create_app()) as test_client:
        yield test_client


def _issue(client, attributes, hospital_id="city_hospital"):
    response = client.post(
        "/api/hospital/issue",
        json={"hospital_id": hospital_id, "credential_type": "identity", "attributes": attributes},
    )
    assert response.status_code == 201
    return response.json()


def _open_age_request(client):
    response = client.post(
        "/api/provider/request/catalog",
        json={"provider_id": PROVIDER_ID, "provider_name": "Apollo Pharmacy Andheri", "predicate_key": "age_18"},
    )
    assert response.status_code == 201
    return response.json()


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "mediguard"}


def test_catalog_lists_predefined_predicates(client):
    response = client.get("/api/provider/catalog")

    assert response.status_code == 200
    entries = {e["key"]: e for e in response.json()["entries"]}
    assert set(entries) == {"vaccination_covid", "age_18", "insurance_active"}
    assert entries["age_18"]["predicate"] == {
        "type": "COMPARISON",
        "attribute": "age",
        "operator": "GTE",
        "value": "18",
    }
    assert entries["age_18"]["predicate_human_readable"] == "age >= 18"


def test_full_age_verification_flow(client, fixed_clock):
    """
    Test complete verification flow.

    Flow:
    1. Hospital issues an identity credential (POST /api/hospital/issue)
    2. Provider opens an age_18 request (POST /api/provider/request/catalog)
    3. Holder submits a proof (POST /api/provider/verify)
    4. Provider reads the audit feed and the session status
    """
    issued = _issue(client, {"name": "Asha Rao", "age": "34"})
    assert issued["hospital_id"] == "city_hospital"
    offer = decode(issued["credential_offer_uri"]).unwrap()
    assert offer.credential.id == issued["credential_id"]

    created = _open_age_request(client)
    assert created["predicate_human_readable"] == "age >= 18"
    assert created["qr_code_data"] == f"mediguard://verify?req={created['request_id']}"
    assert created["qr_code_url"] == f"http://testserver/api/provider/request/{created['request_id']}/qrcode"
    assert decode(created["qr_code_data"]).unwrap().request_id.value == created["request_id"]

    fixed_clock.advance(2)
    verify_response = client.post(
        "/api/provider/verify",
        json={
            "request_id": created["request_id"],
            "proof": issued["signature"],
            "revealed_attributes": {"age": "34"},
            "issuer_public_key": issued["issuer_public_key"],
        },
    )
    assert verify_response.status_code == 200
    verification = verify_response.json()
    assert verification["verified"] is True
    assert verification["reason"] is None

    audit_response = client.get(f"/api/provider/{PROVIDER_ID}/audit")
    assert audit_response.status_code == 200
    audit = audit_response.json()
    assert audit["provider_id"] == PROVIDER_ID
    assert audit["verifications"] == [
        {
            "verification_id": verification["verification_id"],
            "verified": True,
            "predicate_human_readable": "age >= 18",
            "timestamp": verification["timestamp"],
            "request_id": created["request_id"],
        }
    ]

    status_response = client.get(f"/api/provider/request/{created['request_id']}/status")
    assert status_response.status_code == 200
    status = status_response.json()
    assert status["status"] == "VERIFIED"
    assert status["attempts"] == 1
    assert status["verification_id"] == verification["verification_id"]


def test_failed_proof_is_recorded(client, fixed_clock):
    issued = _issue(client, {"age": "16"})
    created = _open_age_request(client)

    response = client.post(
        "/api/provider/verify",
        json={
            "request_id": created["request_id"],
            "proof": issued["signature"],
            "revealed_attributes": {"age": "16"},
            "issuer_public_key": issued["issuer_public_key"],
        },
    )

    assert response.status_code == 200
    assert response.json()["verified"] is False
    assert response.json()["reason"]

    records = client.get(f"/api/provider/{PROVIDER_ID}/audit").json()["verifications"]
    assert [r["verified"] for r in records] == [False]
    assert client.get(f"/api/provider/request/{created['request_id']}/status").json()["status"] == "FAILED"


def test_audit_is_newest_first_and_limited(client, fixed_clock):
    issued = _issue(client, {"age": "34"})
    ids = []
    for _ in range(3):
        created = _open_age_request(client)
        fixed_clock.advance(1)
        response = client.post(
            "/api/provider/verify",
            json={
                "request_id": created["request_id"],
                "proof": issued["signature"],
                "revealed_attributes": {"age": "34"},
                "issuer_public_key": issued["issuer_public_key"],
            },
        )
        ids.append(response.json()["verification_id"])

    records = client.get(f"/api/provider/{PROVIDER_ID}/audit", params={"limit": 2}).json()["verifications"]

    assert [r["verification_id"] for r in records] == list(reversed(ids))[:2]


def test_custom_predicate_request(client):
    response = client.post(
        "/api/provider/request",
        json={
            "provider_id": PROVIDER_ID,
            "provider_name": "Apollo Pharmacy Andheri",
            "provider_type": "pharmacy",
            "predicate": {"attribute": "age", "operator": "GT", "value": "65"},
        },
    )

    assert response.status_code == 201
    assert response.json()["predicate"]["operator"] == "GT"


def test_unknown_catalog_key(client):
    response = client.post(
        "/api/provider/request/catalog",
        json={"provider_id": PROVIDER_ID, "provider_name": "Apollo", "predicate_key": "blood_type_o"},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "unknown_predicate_kind"


def test_unknown_request(client):
    status_response = client.get("/api/provider/request/req_missing/status")
    assert status_response.status_code == 404
    assert status_response.json()["detail"]["error"] == "request_not_found"

    verify_response = client.post(
        "/api/provider/verify",
        json={"request_id": "req_missing", "proof": "p", "revealed_attributes": {}, "issuer_public_key": "{}"},
    )
    assert verify_response.status_code == 404
    assert client.get(f"/api/provider/{PROVIDER_ID}/audit").json()["verifications"] == []


def test_request_qrcode(client):
    created = _open_age_request(client)

    response = client.get(f"/api/provider/request/{created['request_id']}/qrcode")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")

    svg_response = client.get(f"/api/provider/request/{created['request_id']}/qrcode", params={"format": "svg"})
    assert svg_response.status_code == 200
    assert svg_response.headers["content-type"].startswith("image/svg+xml")

    assert client.get("/api/provider/request/req_missing/qrcode").status_code == 404


def test_issuer_public_key(client):
    missing = client.get("/api/hospital/city_hospital/public-key")
    assert missing.status_code == 404
    assert missing.json()["detail"]["error"] == "issuer_not_found"

    init = client.post("/api/hospital/init", json={"hospital_id": "city_hospital", "hospital_name": "City Hospital"})
    assert init.status_code == 200

    response = client.get("/api/hospital/city_hospital/public-key")
    assert response.status_code == 200
    assert response.json()["public_key"] == init.json()["public_key"]


def test_issue_defaults_to_configured_issuer(client):
    response = client.post("/api/hospital/issue", json={"credential_type": "vaccination", "attributes": {"vaccination_type": "COVID-19"}})

    assert response.status_code == 201
    assert response.json()["hospital_id"] == "demo_issuer"


def test_issue_rejects_reserved_attributes(client):
    response = client.post(
        "/api/hospital/issue", json={"credential_type": "identity", "attributes": {"id": "x"}}
    )

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "issuance_failed"


def test_audit_hides_request_id_when_configured(fixed_clock):
    set_container(
        DependencyContainer(config=create_test_config(audit_exposes_request_id=False), clock=fixed_clock)
    )

    with TestClient(create_app()) as client:
        issued = _issue(client, {"age": "34"})
        created = _open_age_request(client)
        client.post(
            "/api/provider/verify",
            json={
                "request_id": created["request_id"],
                "proof": issued["signature"],
                "revealed_attributes": {"age": "34"},
                "issuer_public_key": issued["issuer_public_key"],
            },
        )

        records = client.get(f"/api/provider/{PROVIDER_ID}/audit").json()["verifications"]
        status = client.get(f"/api/provider/request/{created['request_id']}/status").json()

    assert records[0]["request_id"] is None
    assert status["status"] == "VERIFIED"
