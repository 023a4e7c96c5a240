"""Verification sessions and the audit trail

A verification session is created once by a provider and never changes
afterwards. Its outcome is not stored on the session: every completed proof
attempt appends an AuditRecord, and the session's status is derived from the
records that reference it.

Audit records are append-only. They are listed newest-first; records with the
same timestamp are ordered by their append sequence, latest first.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List, Optional

from mediguard.domain.clock import Clock
from mediguard.domain.code_scheme import encode_verify
from mediguard.domain.predicate import Predicate
from mediguard.domain.value_objects import (
    DEFAULT_CODE_SCHEME,
    ProviderId,
    RequestId,
    SessionStatus,
    VerificationId,
)


@dataclass(frozen=True)
class VerificationSession:
    """
    A single verification request.

    Attributes:
        request_id: Unique identifier, assigned once at creation
        provider_id: Provider that created the session
        provider_name: Display name of the provider
        provider_type: Kind of provider (pharmacy, clinic, ...)
        predicate: Claim the holder must prove
        created_at: Creation time
        code_payload: Verification-intent URI derived from request_id
    """

    request_id: RequestId
    provider_id: ProviderId
    provider_name: str
    provider_type: str
    predicate: Predicate
    created_at: datetime
    code_payload: str

    def __post_init__(self) -> None:
        if not self.provider_name or not self.provider_name.strip():
            raise ValueError("provider_name cannot be blank")
        if not self.provider_type or not self.provider_type.strip():
            raise ValueError("provider_type cannot be blank")
        if not self.code_payload:
            raise ValueError("code_payload cannot be empty")


@dataclass(frozen=True)
class AuditRecord:
    """
    Immutable record of one completed proof attempt.

    Attributes:
        verification_id: Identifier of this record
        provider_id: Provider whose feed the record belongs to
        verified: Whether the proof was accepted
        predicate_human_readable: Rendering of the predicate that was checked
        timestamp: When the attempt completed
        request_id: Session the attempt belongs to, when known
        sequence: Append position in the trail, breaks timestamp ties
    """

    verification_id: VerificationId
    provider_id: ProviderId
    verified: bool
    predicate_human_readable: str
    timestamp: datetime
    request_id: Optional[RequestId] = None
    sequence: int = 0

    def __post_init__(self) -> None:
        if self.sequence < 0:
            raise ValueError(f"sequence must be non-negative, got {self.sequence}")


# ======================
# Factory Functions
# ======================


def create_verification_session(
    provider_id: ProviderId,
    provider_name: str,
    provider_type: str,
    predicate: Predicate,
    clock: Clock,
    scheme: str = DEFAULT_CODE_SCHEME,
    request_id: Optional[RequestId] = None,
) -> VerificationSession:
    """
    Create a session with a fresh request_id and its code payload.

    Args:
        provider_id: Provider identifier
        provider_name: Provider display name
        provider_type: Provider kind
        predicate: Predicate to prove
        clock: Clock for the creation timestamp
        scheme: URI scheme token for the code payload
        request_id: Explicit identifier (generated when omitted)
    """
    request_id = request_id or RequestId.generate()
    return VerificationSession(
        request_id=request_id,
        provider_id=provider_id,
        provider_name=provider_name,
        provider_type=provider_type,
        predicate=predicate,
        created_at=clock.now(),
        code_payload=encode_verify(request_id, scheme=scheme),
    )


def create_audit_record(
    provider_id: ProviderId,
    verified: bool,
    predicate_human_readable: str,
    clock: Clock,
    request_id: Optional[RequestId] = None,
    sequence: int = 0,
) -> AuditRecord:
    return AuditRecord(
        verification_id=VerificationId.generate(),
        provider_id=provider_id,
        verified=verified,
        predicate_human_readable=predicate_human_readable,
        timestamp=clock.now(),
        request_id=request_id,
        sequence=sequence,
    )


# ======================
# Query Functions
# ======================


def newest_first(records: Iterable[AuditRecord]) -> List[AuditRecord]:
    """Order records newest-first, later appends first on equal timestamps"""
    return sorted(records, key=lambda r: (r.timestamp, r.sequence), reverse=True)


def without_request_id(record: AuditRecord) -> AuditRecord:
    """Copy of a record as exposed by feeds that do not carry request_id"""
    return replace(record, request_id=None)


def derive_session_status(records: Iterable[AuditRecord]) -> SessionStatus:
    """
    Outcome of a session given the audit records written for it.

    VERIFIED if any attempt succeeded, FAILED if attempts exist and all
    failed, PENDING if there were none.
    """
    seen_any = False
    for record in records:
        if record.verified:
            return SessionStatus.VERIFIED
        seen_any = True
    return SessionStatus.FAILED if seen_any else SessionStatus.PENDING
