"""Value objects for the domain layer"""

import secrets
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Final


DEFAULT_CODE_SCHEME: Final[str] = "mediguard"


@dataclass(frozen=True)
class RequestId:
    """
    Identifier of a verification session.

    Carried in the scannable code as the 'req' query parameter and, where the
    audit feed exposes it, on the audit record of each proof attempt.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("RequestId cannot be blank")

    def __str__(self) -> str:
        return self.value

    @staticmethod
    def generate() -> "RequestId":
        """Generate a URL-safe random identifier"""
        return RequestId(value=secrets.token_urlsafe(24))


@dataclass(frozen=True)
class VerificationId:
    """Identifier of a single audit record"""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("VerificationId cannot be blank")

    def __str__(self) -> str:
        return self.value

    @staticmethod
    def generate() -> "VerificationId":
        return VerificationId(value=uuid.uuid4().hex)


@dataclass(frozen=True)
class ProviderId:
    """Identifier of a verifier/provider (e.g. 'apollo-pharmacy')"""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("ProviderId cannot be blank")

    def __str__(self) -> str:
        return self.value


class PredicateOperator(str, Enum):
    """Comparison operators a predicate can express"""

    GT: Final[str] = "GT"
    GTE: Final[str] = "GTE"
    LT: Final[str] = "LT"
    LTE: Final[str] = "LTE"
    EQ: Final[str] = "EQ"
    CONTAINS: Final[str] = "CONTAINS"

    def __str__(self) -> str:
        return self.value


class SessionStatus(str, Enum):
    """Server-side outcome of a verification session"""

    PENDING: Final[str] = "PENDING"
    VERIFIED: Final[str] = "VERIFIED"
    FAILED: Final[str] = "FAILED"

    def __str__(self) -> str:
        return self.value
