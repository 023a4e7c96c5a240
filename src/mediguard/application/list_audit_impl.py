"""ListAudit use case implementation"""

from returns.result import Failure, Result, Success

from mediguard.domain import MediguardConfig, without_request_id
from mediguard.port.input import ListAudit, ListAuditError, ListAuditRequest, ListAuditResponse
from mediguard.port.output import AuditTrail


class ListAuditImpl(ListAudit):
    """
    Implementation of ListAudit use case.

    The listing is capped at config.audit_list_limit. Deployments that do
    not expose request_id on the feed get records with request_id removed.
    """

    def __init__(self, audit_trail: AuditTrail, config: MediguardConfig):
        self.audit_trail = audit_trail
        self.config = config

    async def execute(self, request: ListAuditRequest) -> Result[ListAuditResponse, ListAuditError]:
        limit = min(request.limit, self.config.audit_list_limit)

        list_result = await self.audit_trail.list_for_provider(request.provider_id, limit)
        if isinstance(list_result, Failure):
            return Failure(ListAuditError(f"Failed to read audit trail: {list_result.failure()}"))

        records = list_result.unwrap()
        if not self.config.audit_exposes_request_id:
            records = [without_request_id(r) for r in records]

        return Success(ListAuditResponse(provider_id=request.provider_id, records=records))
