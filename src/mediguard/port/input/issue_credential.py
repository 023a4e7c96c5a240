"""Issue credential use case - Sign attributes as an issuer"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from returns.result import Result

from mediguard.domain import Credential


@dataclass(frozen=True)
class IssueCredentialRequest:
    """
    Attributes:
        issuer_id: Issuer (hospital) signing the credential
        credential_type: Credential type
        attributes: Attribute values to sign
        credential_id: Explicit credential id (generated when omitted)
    """

    issuer_id: str
    credential_type: str
    attributes: Dict[str, str]
    credential_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.issuer_id or not self.issuer_id.strip():
            raise ValueError("issuer_id cannot be blank")
        if not self.credential_type or not self.credential_type.strip():
            raise ValueError("credential_type cannot be blank")


@dataclass(frozen=True)
class IssueCredentialResponse:
    """
    Attributes:
        credential: Signed credential, ready to be offered to a wallet
        issuer_public_key: Key that verifies the signature
        credential_offer_uri: Credential-import code payload
    """

    credential: Credential
    issuer_public_key: str
    credential_offer_uri: str


class IssueCredentialError(Exception):
    """Error while issuing a credential"""

    pass


class IssueCredential(ABC):
    """
    Use case: Issue a signed credential and its import code.
    """

    @abstractmethod
    async def execute(self, request: IssueCredentialRequest) -> Result[IssueCredentialResponse, IssueCredentialError]:
        pass
