"""Tests for verification sessions and audit records"""

from datetime import timedelta

import pytest

from mediguard.domain import (
    FixedClock,
    Predicate,
    ProviderId,
    RequestId,
    SessionStatus,
    create_audit_record,
    create_verification_session,
    decode,
    derive_session_status,
    newest_first,
    without_request_id,
)


class TestCreateVerificationSession:
    """Tests for session creation"""

    def test_code_payload_carries_request_id(
        self, fixed_clock: FixedClock, provider_id: ProviderId, age_predicate: Predicate
    ):
        session = create_verification_session(
            provider_id=provider_id,
            provider_name="Apollo Pharmacy Andheri",
            provider_type="pharmacy",
            predicate=age_predicate,
            clock=fixed_clock,
        )

        assert session.created_at == fixed_clock.now()
        assert session.code_payload == f"mediguard://verify?req={session.request_id.value}"
        assert decode(session.code_payload).unwrap().request_id == session.request_id

    def test_request_ids_are_unique(self, fixed_clock: FixedClock, provider_id: ProviderId, age_predicate: Predicate):
        ids = {
            create_verification_session(provider_id, "Apollo", "pharmacy", age_predicate, fixed_clock).request_id
            for _ in range(50)
        }
        assert len(ids) == 50

    def test_explicit_request_id_and_scheme(
        self, fixed_clock: FixedClock, provider_id: ProviderId, age_predicate: Predicate, request_id: RequestId
    ):
        session = create_verification_session(
            provider_id, "Apollo", "pharmacy", age_predicate, fixed_clock, scheme="healthpass", request_id=request_id
        )

        assert session.request_id == request_id
        assert session.code_payload == "healthpass://verify?req=req_abcdef"

    def test_blank_provider_name_rejected(
        self, fixed_clock: FixedClock, provider_id: ProviderId, age_predicate: Predicate
    ):
        with pytest.raises(ValueError, match="provider_name"):
            create_verification_session(provider_id, "  ", "pharmacy", age_predicate, fixed_clock)


class TestAuditRecords:
    """Tests for audit record creation and ordering"""

    def test_create_audit_record(self, fixed_clock: FixedClock, provider_id: ProviderId, request_id: RequestId):
        record = create_audit_record(provider_id, True, "age >= 18", fixed_clock, request_id=request_id, sequence=3)

        assert record.timestamp == fixed_clock.now()
        assert record.request_id == request_id
        assert record.sequence == 3
        assert record.verification_id.value

    def test_negative_sequence_rejected(self, fixed_clock: FixedClock, provider_id: ProviderId):
        with pytest.raises(ValueError, match="sequence"):
            create_audit_record(provider_id, True, "age >= 18", fixed_clock, sequence=-1)

    def test_newest_first_by_timestamp(self, make_record):
        old = make_record(seconds_ago=30)
        new = make_record(seconds_ago=1)
        middle = make_record(seconds_ago=10)

        assert newest_first([old, new, middle]) == [new, middle, old]

    def test_newest_first_breaks_ties_by_sequence(self, make_record):
        """Records sharing a timestamp list the later append first"""
        first = make_record(sequence=1)
        second = make_record(sequence=2)
        third = make_record(sequence=3)

        assert newest_first([second, first, third]) == [third, second, first]
        assert newest_first([third, first, second]) == [third, second, first]

    def test_without_request_id(self, make_record, request_id: RequestId):
        record = make_record(request_id=request_id)

        stripped = without_request_id(record)

        assert stripped.request_id is None
        assert stripped.verification_id == record.verification_id


class TestDeriveSessionStatus:
    """Tests for session outcome derivation"""

    def test_pending_without_records(self):
        assert derive_session_status([]) is SessionStatus.PENDING

    def test_failed_when_all_attempts_failed(self, make_record):
        assert derive_session_status([make_record(verified=False), make_record(verified=False)]) is SessionStatus.FAILED

    def test_verified_when_any_attempt_succeeded(self, make_record, fixed_clock: FixedClock):
        failed = make_record(verified=False, seconds_ago=10)
        fixed_clock.advance(timedelta(seconds=1))
        verified = make_record(verified=True)

        assert derive_session_status([verified, failed]) is SessionStatus.VERIFIED
