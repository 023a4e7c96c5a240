"""Verify proof use case - Check a holder's proof for a session"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict

from returns.result import Result

from mediguard.domain import RequestId, VerificationId


@dataclass(frozen=True)
class VerifyProofRequest:
    """
    Proof submitted by a holder.

    Attributes:
        request_id: Session the proof answers
        proof: Opaque serialized proof
        revealed_attributes: Attribute values the holder discloses
        issuer_public_key: Key of the issuer that signed the credential
    """

    request_id: RequestId
    proof: str
    revealed_attributes: Dict[str, str] = field(default_factory=dict)
    issuer_public_key: str = ""


@dataclass(frozen=True)
class VerifyProofResponse:
    """
    Outcome of a proof attempt.

    Attributes:
        verified: Whether the proof was accepted
        timestamp: When the attempt was recorded
        verification_id: Audit record written for the attempt
        reason: Why the proof was rejected (empty when verified)
    """

    verified: bool
    timestamp: datetime
    verification_id: VerificationId
    reason: str = ""


class VerifyProofError(Exception):
    """Error while processing a proof"""

    pass


class ProofSessionNotFound(VerifyProofError):
    """The proof names a session that does not exist"""

    def __init__(self, request_id: RequestId):
        self.request_id = request_id
        super().__init__(f"Verification session not found: {request_id}")


class VerifyProof(ABC):
    """
    Use case: Verify a proof and record the attempt.

    Flow:
    1. Retrieve the session by request_id
    2. Check the proof signature through the signature service
    3. Evaluate the session predicate against the revealed attributes
    4. Record exactly one audit record, accepted or not
    """

    @abstractmethod
    async def execute(self, request: VerifyProofRequest) -> Result[VerifyProofResponse, VerifyProofError]:
        pass
