"""CreateSession use case implementation"""

import logging

from returns.result import Failure, Result, Success

from mediguard.domain import (
    Clock,
    MediguardConfig,
    create_verification_session,
    to_human_readable,
)
from mediguard.port.input import (
    CreateSession,
    CreateSessionError,
    CreateSessionRequest,
    CreateSessionResponse,
)
from mediguard.port.output import SessionRepository

log = logging.getLogger(__name__)


class CreateSessionImpl(CreateSession):
    """
    Implementation of CreateSession use case.

    Creating a session has no side effect beyond storing it.
    """

    def __init__(self, repository: SessionRepository, config: MediguardConfig, clock: Clock):
        self.repository = repository
        self.config = config
        self.clock = clock

    async def execute(self, request: CreateSessionRequest) -> Result[CreateSessionResponse, CreateSessionError]:
        try:
            session = create_verification_session(
                provider_id=request.provider_id,
                provider_name=request.provider_name,
                provider_type=request.provider_type,
                predicate=request.predicate,
                clock=self.clock,
                scheme=self.config.code_scheme,
            )

            save_result = await self.repository.save(session)
            if isinstance(save_result, Failure):
                return Failure(CreateSessionError(f"Failed to save session: {save_result.failure()}"))

            log.info(
                "Created verification session %s for provider %s",
                session.request_id,
                session.provider_id,
            )
            return Success(
                CreateSessionResponse(
                    session=session,
                    predicate_human_readable=to_human_readable(session.predicate),
                )
            )

        except ValueError as e:
            return Failure(CreateSessionError(f"Invalid session request: {e}"))
        except Exception as e:
            log.exception("Unexpected error creating session")
            return Failure(CreateSessionError(f"Unexpected error: {e}"))
