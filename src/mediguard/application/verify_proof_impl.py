"""VerifyProof use case implementation"""

import logging

from returns.result import Failure, Result, Success

from mediguard.domain import evaluate, to_human_readable
from mediguard.port.input import (
    ProofSessionNotFound,
    RecordAudit,
    RecordAuditRequest,
    VerifyProof,
    VerifyProofError,
    VerifyProofRequest,
    VerifyProofResponse,
)
from mediguard.port.output import SessionNotFound, SessionRepository, SignatureService

log = logging.getLogger(__name__)


class VerifyProofImpl(VerifyProof):
    """
    Implementation of VerifyProof use case.

    Every attempt against an existing session, accepted or rejected, ends in
    exactly one audit record. Attempts against unknown sessions are refused
    without touching the audit trail.
    """

    def __init__(
        self,
        repository: SessionRepository,
        signature_service: SignatureService,
        record_audit: RecordAudit,
    ):
        self.repository = repository
        self.signature_service = signature_service
        self.record_audit = record_audit

    async def execute(self, request: VerifyProofRequest) -> Result[VerifyProofResponse, VerifyProofError]:
        """
        Flow:
        1. Retrieve session by request_id
        2. Verify the proof signature and revealed attributes
        3. Evaluate the predicate against the revealed attributes
        4. Record the attempt
        """
        try:
            get_result = await self.repository.get_by_request_id(request.request_id)
            if isinstance(get_result, Failure):
                error = get_result.failure()
                if isinstance(error, SessionNotFound):
                    return Failure(ProofSessionNotFound(request.request_id))
                return Failure(VerifyProofError(f"Failed to retrieve session: {error}"))

            session = get_result.unwrap()

            check_result = await self.signature_service.verify_proof(
                proof=request.proof,
                revealed_attributes=request.revealed_attributes,
                issuer_public_key=request.issuer_public_key,
            )
            if isinstance(check_result, Failure):
                return Failure(VerifyProofError(f"Signature service unavailable: {check_result.failure()}"))

            check = check_result.unwrap()
            reason = check.reason
            verified = check.valid
            if verified and not evaluate(session.predicate, request.revealed_attributes):
                verified = False
                reason = "Revealed attributes do not satisfy the predicate"

            record_result = await self.record_audit.execute(
                RecordAuditRequest(
                    provider_id=session.provider_id,
                    verified=verified,
                    predicate_human_readable=to_human_readable(session.predicate),
                    request_id=session.request_id,
                )
            )
            if isinstance(record_result, Failure):
                return Failure(VerifyProofError(f"Failed to record attempt: {record_result.failure()}"))

            record = record_result.unwrap()
            if not verified:
                log.info("Proof for session %s rejected: %s", session.request_id, reason)

            return Success(
                VerifyProofResponse(
                    verified=verified,
                    timestamp=record.timestamp,
                    verification_id=record.verification_id,
                    reason=reason,
                )
            )

        except Exception as e:
            log.exception("Unexpected error verifying proof")
            return Failure(VerifyProofError(f"Unexpected error: {e}"))
