"""In-memory implementations of SessionRepository and AuditTrail"""

import asyncio
import itertools
from typing import Dict, List, Optional

from returns.result import Failure, Result, Success

from mediguard.domain import (
    AuditRecord,
    Clock,
    ProviderId,
    RequestId,
    VerificationSession,
    create_audit_record,
    newest_first,
)
from mediguard.port.output import AuditTrail, SessionNotFound, SessionRepository


class DuplicateSession(Exception):
    """A session with the same request_id is already stored"""

    def __init__(self, request_id: RequestId):
        self.request_id = request_id
        super().__init__(f"Session already exists: {request_id}")


class InMemorySessionRepository(SessionRepository):
    """
    In-memory implementation of SessionRepository.

    Sessions are indexed by request_id. Thread-safe for async operations
    using asyncio.Lock.
    """

    def __init__(self) -> None:
        self._by_request_id: Dict[str, VerificationSession] = {}
        self._lock = asyncio.Lock()

    async def save(self, session: VerificationSession) -> Result[None, Exception]:
        try:
            async with self._lock:
                if session.request_id.value in self._by_request_id:
                    return Failure(DuplicateSession(session.request_id))
                self._by_request_id[session.request_id.value] = session

            return Success(None)
        except Exception as e:
            return Failure(e)

    async def get_by_request_id(self, request_id: RequestId) -> Result[VerificationSession, SessionNotFound]:
        async with self._lock:
            session = self._by_request_id.get(request_id.value)

        if session is None:
            return Failure(SessionNotFound(identifier=request_id.value))

        return Success(session)

    async def count(self) -> Result[int, Exception]:
        async with self._lock:
            return Success(len(self._by_request_id))

    async def clear(self) -> Result[None, Exception]:
        """Clear all sessions (useful for testing)"""
        async with self._lock:
            self._by_request_id.clear()
        return Success(None)


class InMemoryAuditTrail(AuditTrail):
    """
    In-memory append-only audit trail.

    Records are kept in append order; each gets a monotonically increasing
    sequence number so listings stay stable when timestamps collide.
    """

    def __init__(self, clock: Clock):
        """
        Args:
            clock: Clock stamping each appended record
        """
        self.clock = clock
        self._records: List[AuditRecord] = []
        self._sequence = itertools.count()
        self._lock = asyncio.Lock()

    async def append(
        self,
        provider_id: ProviderId,
        verified: bool,
        predicate_human_readable: str,
        request_id: Optional[RequestId] = None,
    ) -> Result[AuditRecord, Exception]:
        try:
            async with self._lock:
                record = create_audit_record(
                    provider_id=provider_id,
                    verified=verified,
                    predicate_human_readable=predicate_human_readable,
                    clock=self.clock,
                    request_id=request_id,
                    sequence=next(self._sequence),
                )
                self._records.append(record)

            return Success(record)
        except Exception as e:
            return Failure(e)

    async def list_for_provider(self, provider_id: ProviderId, limit: int) -> Result[list[AuditRecord], Exception]:
        async with self._lock:
            records = [r for r in self._records if r.provider_id == provider_id]

        return Success(newest_first(records)[:limit])

    async def list_for_request(self, request_id: RequestId) -> Result[list[AuditRecord], Exception]:
        async with self._lock:
            records = [r for r in self._records if r.request_id == request_id]

        return Success(newest_first(records))

    async def count(self) -> int:
        async with self._lock:
            return len(self._records)
