"""Session repository and audit trail ports - Interfaces for session persistence"""

from abc import ABC, abstractmethod
from typing import Optional

from returns.result import Result

from mediguard.domain import (
    AuditRecord,
    ProviderId,
    RequestId,
    VerificationSession,
)


class SessionNotFound(Exception):
    """Raised when no session exists for a request id"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Verification session not found: {identifier}")


class SessionRepository(ABC):
    """
    Repository for verification sessions.

    Sessions are written once at creation and only read afterwards.
    Implementations must be safe for concurrent callers.
    """

    @abstractmethod
    async def save(self, session: VerificationSession) -> Result[None, Exception]:
        """
        Persist a new session.

        Returns:
            Success(None) or Failure(exception), e.g. on a duplicate request_id
        """
        pass

    @abstractmethod
    async def get_by_request_id(self, request_id: RequestId) -> Result[VerificationSession, SessionNotFound]:
        """
        Retrieve a session by request ID.

        Returns:
            Success(VerificationSession) or Failure(SessionNotFound)
        """
        pass

    @abstractmethod
    async def count(self) -> Result[int, Exception]:
        pass


class AuditTrail(ABC):
    """
    Append-only log of completed proof attempts.

    Concurrent writers and readers are allowed; a reader never sees a
    partially appended record.
    """

    @abstractmethod
    async def append(
        self,
        provider_id: ProviderId,
        verified: bool,
        predicate_human_readable: str,
        request_id: Optional[RequestId] = None,
    ) -> Result[AuditRecord, Exception]:
        """
        Append a record, stamping its timestamp and sequence.

        Returns:
            Success(the stored AuditRecord) or Failure(exception)
        """
        pass

    @abstractmethod
    async def list_for_provider(self, provider_id: ProviderId, limit: int) -> Result[list[AuditRecord], Exception]:
        """
        Records for a provider, newest-first, at most limit of them.

        Returns:
            Success(list of records) or Failure(exception)
        """
        pass

    @abstractmethod
    async def list_for_request(self, request_id: RequestId) -> Result[list[AuditRecord], Exception]:
        """
        Records written for one session, newest-first.

        Returns:
            Success(list of records) or Failure(exception)
        """
        pass
