"""Record audit use case - Append the outcome of a proof attempt"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from returns.result import Result

from mediguard.domain import AuditRecord, ProviderId, RequestId


@dataclass(frozen=True)
class RecordAuditRequest:
    """
    Outcome of one completed proof attempt.

    Attributes:
        provider_id: Provider whose feed receives the record
        verified: Whether the proof was accepted
        predicate_human_readable: Rendering of the predicate that was checked
        request_id: Session of the attempt, when known
    """

    provider_id: ProviderId
    verified: bool
    predicate_human_readable: str
    request_id: Optional[RequestId] = None


class RecordAuditError(Exception):
    """Error while appending to the audit trail"""

    pass


class RecordAudit(ABC):
    """
    Use case: Append an immutable audit record.

    This is the only write path into the audit trail.
    """

    @abstractmethod
    async def execute(self, request: RecordAuditRequest) -> Result[AuditRecord, RecordAuditError]:
        """
        Execute the record audit use case.

        Returns:
            Success(AuditRecord) or Failure(RecordAuditError)
        """
        pass
