"""RecordAudit use case implementation"""

import logging

from returns.result import Failure, Result, Success

from mediguard.domain import AuditRecord
from mediguard.port.input import RecordAudit, RecordAuditError, RecordAuditRequest
from mediguard.port.output import AuditTrail

log = logging.getLogger(__name__)


class RecordAuditImpl(RecordAudit):
    def __init__(self, audit_trail: AuditTrail):
        self.audit_trail = audit_trail

    async def execute(self, request: RecordAuditRequest) -> Result[AuditRecord, RecordAuditError]:
        if not request.predicate_human_readable.strip():
            return Failure(RecordAuditError("predicate_human_readable cannot be blank"))

        append_result = await self.audit_trail.append(
            provider_id=request.provider_id,
            verified=request.verified,
            predicate_human_readable=request.predicate_human_readable,
            request_id=request.request_id,
        )
        if isinstance(append_result, Failure):
            return Failure(RecordAuditError(f"Failed to append audit record: {append_result.failure()}"))

        record = append_result.unwrap()
        log.info(
            "Recorded %s attempt %s for provider %s (request %s)",
            "verified" if record.verified else "failed",
            record.verification_id,
            record.provider_id,
            record.request_id or "-",
        )
        return Success(record)
