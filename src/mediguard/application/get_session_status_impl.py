"""GetSessionStatus use case implementation"""

from returns.result import Failure, Result, Success

from mediguard.domain import SessionStatus, derive_session_status
from mediguard.port.input import (
    GetSessionStatus,
    GetSessionStatusError,
    GetSessionStatusRequest,
    GetSessionStatusResponse,
    StatusSessionNotFound,
)
from mediguard.port.output import AuditTrail, SessionNotFound, SessionRepository


class GetSessionStatusImpl(GetSessionStatus):
    """
    Implementation of GetSessionStatus use case.

    Correlation is exact: the audit write path stores request_id on every
    record it writes for a session.
    """

    def __init__(self, repository: SessionRepository, audit_trail: AuditTrail):
        self.repository = repository
        self.audit_trail = audit_trail

    async def execute(
        self, request: GetSessionStatusRequest
    ) -> Result[GetSessionStatusResponse, GetSessionStatusError]:
        try:
            get_result = await self.repository.get_by_request_id(request.request_id)
            if isinstance(get_result, Failure):
                error = get_result.failure()
                if isinstance(error, SessionNotFound):
                    return Failure(StatusSessionNotFound(request.request_id))
                return Failure(GetSessionStatusError(f"Failed to retrieve session: {error}"))

            records_result = await self.audit_trail.list_for_request(request.request_id)
            if isinstance(records_result, Failure):
                return Failure(GetSessionStatusError(f"Failed to read audit trail: {records_result.failure()}"))

            records = records_result.unwrap()
            status = derive_session_status(records)

            # VERIFIED is decided by the newest verified record, FAILED by the newest attempt
            deciding = None
            if status == SessionStatus.VERIFIED:
                deciding = next(r for r in records if r.verified)
            elif status == SessionStatus.FAILED:
                deciding = records[0]

            return Success(
                GetSessionStatusResponse(
                    request_id=request.request_id,
                    status=status,
                    attempts=len(records),
                    verification_id=deciding.verification_id if deciding else None,
                    decided_at=deciding.timestamp if deciding else None,
                )
            )

        except Exception as e:
            return Failure(GetSessionStatusError(f"Unexpected error: {e}"))
