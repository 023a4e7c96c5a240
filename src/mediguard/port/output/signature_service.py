"""Signature service port - Interface for issuer signing and proof verification"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict

from returns.result import Result


class SignatureError(Exception):
    """Base exception for signature operations"""

    pass


class SigningError(SignatureError):
    """Error while signing a credential"""

    pass


class UnknownIssuer(SignatureError):
    """No key exists for the issuer"""

    def __init__(self, issuer_id: str):
        self.issuer_id = issuer_id
        super().__init__(f"Unknown issuer: {issuer_id}")


@dataclass(frozen=True)
class SignedAttributes:
    """
    Output of signing a set of attributes.

    Attributes:
        signature: Issuer signature over the attributes
        issuer_public_key: Serialized public key that verifies the signature
    """

    signature: str
    issuer_public_key: str


@dataclass(frozen=True)
class ProofCheck:
    """
    Outcome of checking a proof.

    Attributes:
        valid: Whether the proof verifies and matches the revealed attributes
        reason: Why the proof was rejected (empty when valid)
    """

    valid: bool
    reason: str = ""


class SignatureService(ABC):
    """
    Cryptographic collaborator of the protocol.

    The session protocol only consumes the shapes below; the signature and
    proof formats belong to the implementation.
    """

    @abstractmethod
    async def register_issuer(self, issuer_id: str) -> Result[str, SignatureError]:
        """
        Create (or reuse) the key of an issuer.

        Returns:
            Success(serialized public key) or Failure(SignatureError)
        """
        pass

    @abstractmethod
    async def get_public_key(self, issuer_id: str) -> Result[str, UnknownIssuer]:
        pass

    @abstractmethod
    async def sign_attributes(
        self, issuer_id: str, credential_type: str, attributes: Dict[str, str]
    ) -> Result[SignedAttributes, SignatureError]:
        """
        Sign a credential's attributes as the given issuer.

        Args:
            issuer_id: Issuer identifier
            credential_type: Credential type
            attributes: Attribute values to sign

        Returns:
            Success(SignedAttributes) or Failure(SignatureError)
        """
        pass

    @abstractmethod
    async def verify_proof(
        self, proof: str, revealed_attributes: Dict[str, str], issuer_public_key: str
    ) -> Result[ProofCheck, SignatureError]:
        """
        Check a proof against the revealed attributes.

        Only keys of issuers registered with this service are trusted; a proof
        presented with any other key is invalid. A proof that does not verify
        is Success(ProofCheck(valid=False)); Failure is reserved for the
        service itself being unusable.
        """
        pass
