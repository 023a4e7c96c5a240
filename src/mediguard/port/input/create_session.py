"""Create session use case - Open a new verification session for a provider"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from returns.result import Result

from mediguard.domain import Predicate, ProviderId, VerificationSession


@dataclass(frozen=True)
class CreateSessionRequest:
    """
    Request to open a verification session.

    Attributes:
        provider_id: Provider asking for the proof
        provider_name: Display name of the provider
        provider_type: Kind of provider (pharmacy, clinic, ...)
        predicate: Claim the holder must prove
    """

    provider_id: ProviderId
    provider_name: str
    provider_type: str
    predicate: Predicate


@dataclass(frozen=True)
class CreateSessionResponse:
    """
    Response from create session use case.

    Attributes:
        session: The stored session, including its code payload
        predicate_human_readable: Rendering of the session predicate
    """

    session: VerificationSession
    predicate_human_readable: str


class CreateSessionError(Exception):
    """Error during session creation"""

    pass


class CreateSession(ABC):
    """
    Use case: Open a new verification session.

    Flow:
    1. Generate a fresh request_id
    2. Derive the code payload from the request_id
    3. Store the session
    4. Return the session with the predicate rendering
    """

    @abstractmethod
    async def execute(self, request: CreateSessionRequest) -> Result[CreateSessionResponse, CreateSessionError]:
        """
        Execute the create session use case.

        Returns:
            Success(CreateSessionResponse) or Failure(CreateSessionError)
        """
        pass
