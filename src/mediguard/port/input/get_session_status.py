"""Get session status use case - Outcome of one verification session"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from returns.result import Result

from mediguard.domain import RequestId, SessionStatus, VerificationId


@dataclass(frozen=True)
class GetSessionStatusRequest:
    """
    Attributes:
        request_id: Session to look up
    """

    request_id: RequestId


@dataclass(frozen=True)
class GetSessionStatusResponse:
    """
    Status of a session.

    Attributes:
        request_id: Session identifier
        status: PENDING, VERIFIED or FAILED
        attempts: Number of proof attempts recorded for the session
        verification_id: Record that decided the status (None while PENDING)
        decided_at: Timestamp of that record
    """

    request_id: RequestId
    status: SessionStatus
    attempts: int = 0
    verification_id: Optional[VerificationId] = None
    decided_at: Optional[datetime] = None


class GetSessionStatusError(Exception):
    """Error during status lookup"""

    pass


class StatusSessionNotFound(GetSessionStatusError):
    """No session exists for the request id"""

    def __init__(self, request_id: RequestId):
        self.request_id = request_id
        super().__init__(f"Verification session not found: {request_id}")


class GetSessionStatus(ABC):
    """
    Use case: Report a session's outcome from the audit records written for it.

    Flow:
    1. Check the session exists
    2. Collect the audit records carrying its request_id
    3. Derive PENDING / VERIFIED / FAILED
    """

    @abstractmethod
    async def execute(
        self, request: GetSessionStatusRequest
    ) -> Result[GetSessionStatusResponse, GetSessionStatusError]:
        pass
