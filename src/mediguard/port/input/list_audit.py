"""List audit use case - Read a provider's audit feed"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from returns.result import Result

from mediguard.domain import AuditRecord, ProviderId


@dataclass(frozen=True)
class ListAuditRequest:
    """
    Request for a provider's audit feed.

    Attributes:
        provider_id: Provider whose records are listed
        limit: Max number of records to return
    """

    provider_id: ProviderId
    limit: int = 50

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be positive, got {self.limit}")


@dataclass(frozen=True)
class ListAuditResponse:
    """
    Audit feed, newest-first.

    Attributes:
        provider_id: Provider the records belong to
        records: Records ordered by timestamp, newest first
    """

    provider_id: ProviderId
    records: List[AuditRecord]


class ListAuditError(Exception):
    """Error while reading the audit trail"""

    pass


class ListAudit(ABC):
    """
    Use case: List a provider's audit records.

    The sole read surface for both the history view and the status resolver.
    """

    @abstractmethod
    async def execute(self, request: ListAuditRequest) -> Result[ListAuditResponse, ListAuditError]:
        pass
