"""Fixtures for use case tests"""

from datetime import datetime, timezone

import pytest

from mediguard.adapter import InMemoryAuditTrail, InMemorySessionRepository, JoseSignatureService
from mediguard.application import (
    CreateSessionImpl,
    GetSessionStatusImpl,
    IssueCredentialImpl,
    ListAuditImpl,
    RecordAuditImpl,
    VerifyProofImpl,
)
from mediguard.config import create_test_config
from mediguard.domain import FixedClock, MediguardConfig, ProviderId


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Fixed clock at 2024-01-15 12:00:00 UTC"""
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def config() -> MediguardConfig:
    return create_test_config()


@pytest.fixture
def provider_id() -> ProviderId:
    return ProviderId(value="apollo-andheri")


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def audit_trail(fixed_clock: FixedClock) -> InMemoryAuditTrail:
    return InMemoryAuditTrail(clock=fixed_clock)


@pytest.fixture
def signature_service(fixed_clock: FixedClock) -> JoseSignatureService:
    return JoseSignatureService(clock=fixed_clock)


@pytest.fixture
def create_session(repository, config, fixed_clock) -> CreateSessionImpl:
    return CreateSessionImpl(repository=repository, config=config, clock=fixed_clock)


@pytest.fixture
def record_audit(audit_trail) -> RecordAuditImpl:
    return RecordAuditImpl(audit_trail=audit_trail)


@pytest.fixture
def list_audit(audit_trail, config) -> ListAuditImpl:
    return ListAuditImpl(audit_trail=audit_trail, config=config)


@pytest.fixture
def get_session_status(repository, audit_trail) -> GetSessionStatusImpl:
    return GetSessionStatusImpl(repository=repository, audit_trail=audit_trail)


@pytest.fixture
def verify_proof(repository, signature_service, record_audit) -> VerifyProofImpl:
    return VerifyProofImpl(repository=repository, signature_service=signature_service, record_audit=record_audit)


@pytest.fixture
def issue_credential(signature_service, config) -> IssueCredentialImpl:
    return IssueCredentialImpl(signature_service=signature_service, config=config)
