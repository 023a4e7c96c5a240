"""Tests for the holder-side credential model"""

from datetime import datetime, timezone

from returns.result import Failure, Success

from mediguard.domain import (
    Credential,
    InvalidCredential,
    credential_from_payload,
    credential_to_payload,
    derive_credential_id,
)


class TestCredentialFromPayload:
    """Tests for parsing the flat credential form"""

    def test_valid_payload(self):
        result = credential_from_payload(
            {"id": "c1", "type": "vaccination", "iss": "h1", "sig": "s1", "vaccination_type": "COVID-19"}
        )

        assert isinstance(result, Success)
        credential = result.unwrap()
        assert credential.id == "c1"
        assert credential.type == "vaccination"
        assert credential.attributes == {"vaccination_type": "COVID-19"}
        assert credential.issued_at is None

    def test_missing_signing_fields(self):
        result = credential_from_payload({"id": "c1", "type": "vaccination"})

        assert isinstance(result, Failure)
        error = result.failure()
        assert isinstance(error, InvalidCredential)
        assert error.missing_fields == ("iss", "sig")

    def test_blank_signing_field_counts_as_missing(self):
        error = credential_from_payload({"type": "t", "iss": " ", "sig": "s"}).failure()

        assert error.missing_fields == ("iss",)

    def test_scalar_attributes_become_text(self):
        credential = credential_from_payload(
            {"type": "t", "iss": "i", "sig": "s", "age": 34, "boosted": True, "ratio": 0.5}
        ).unwrap()

        assert credential.attributes == {"age": "34", "boosted": "true", "ratio": "0.5"}

    def test_nested_attribute_rejected(self):
        result = credential_from_payload({"type": "t", "iss": "i", "sig": "s", "doses": [1, 2]})

        assert isinstance(result, Failure)
        assert "doses" in result.failure().message

    def test_numeric_id_is_accepted(self):
        credential = credential_from_payload({"id": 42, "type": "t", "iss": "i", "sig": "s"}).unwrap()

        assert credential.id == "42"

    def test_missing_id_is_derived(self):
        credential = credential_from_payload({"type": "t", "iss": "i", "sig": "s"}).unwrap()

        assert credential.id == derive_credential_id("i", "s")

    def test_issued_at_is_parsed(self):
        credential = credential_from_payload(
            {"type": "t", "iss": "i", "sig": "s", "issuedAt": "2024-01-15T12:00:00.000Z"}
        ).unwrap()

        assert credential.issued_at == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_invalid_issued_at(self):
        result = credential_from_payload({"type": "t", "iss": "i", "sig": "s", "issuedAt": "soon"})

        assert isinstance(result, Failure)


class TestCredentialToPayload:
    """Tests for flattening a credential"""

    def test_flat_shape(self):
        credential = Credential(id="c1", type="t", iss="i", sig="s", attributes={"age": "34"})

        assert credential_to_payload(credential) == {"id": "c1", "type": "t", "iss": "i", "sig": "s", "age": "34"}

    def test_issued_at_only_on_request(self):
        stamped = Credential(id="c1", type="t", iss="i", sig="s").with_issued_at(
            datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        )

        assert "issuedAt" not in credential_to_payload(stamped)
        assert credential_to_payload(stamped, include_issued_at=True)["issuedAt"] == "2024-01-15T12:00:00+00:00"

    def test_attribute_cannot_shadow_signing_field(self):
        credential = Credential(id="c1", type="t", iss="i", sig="s", attributes={"sig": "forged"})

        assert credential_to_payload(credential)["sig"] == "s"


class TestDeriveCredentialId:
    def test_deterministic_and_issuer_scoped(self):
        assert derive_credential_id("i", "s") == derive_credential_id("i", "s")
        assert derive_credential_id("i", "s") != derive_credential_id("j", "s")
