"""Common test fixtures for domain tests"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from mediguard.domain import (
    AuditRecord,
    FixedClock,
    Predicate,
    PredicateOperator,
    ProviderId,
    RequestId,
    VerificationId,
)


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Fixed clock at 2024-01-15 12:00:00 UTC"""
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def request_id() -> RequestId:
    """Sample request ID"""
    return RequestId(value="req_abcdef")


@pytest.fixture
def provider_id() -> ProviderId:
    """Sample provider ID"""
    return ProviderId(value="apollo-andheri")


@pytest.fixture
def age_predicate() -> Predicate:
    """age >= 18"""
    return Predicate(attribute="age", operator=PredicateOperator.GTE, value="18")


@pytest.fixture
def make_record(fixed_clock: FixedClock, provider_id: ProviderId) -> Callable[..., AuditRecord]:
    """Factory for audit records stamped relative to fixed_clock"""
    counter = {"n": 0}

    def _make(
        verified: bool = True,
        seconds_ago: float = 0.0,
        request_id: Optional[RequestId] = None,
        sequence: Optional[int] = None,
    ) -> AuditRecord:
        counter["n"] += 1
        return AuditRecord(
            verification_id=VerificationId(value=f"ver_{counter['n']}"),
            provider_id=provider_id,
            verified=verified,
            predicate_human_readable="age >= 18",
            timestamp=fixed_clock.now() - timedelta(seconds=seconds_ago),
            request_id=request_id,
            sequence=counter["n"] if sequence is None else sequence,
        )

    return _make