"""Holder-side credential model

A credential travels as a flat JSON object: the signing fields (id, type,
iss, sig) sit next to the attribute values. The same flat shape is used in
credential-offer codes and in the wallet's persisted state, where it also
carries issuedAt.
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Final, FrozenSet, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from returns.result import Failure, Result, Success

from mediguard.domain.clock import parse_timestamp


REQUIRED_FIELDS: Final[Tuple[str, ...]] = ("type", "iss", "sig")
RESERVED_FIELDS: Final[FrozenSet[str]] = frozenset({"id", "type", "iss", "sig", "issuedAt"})


class Credential(BaseModel):
    """
    Credential held in a wallet.

    Attributes:
        id: Identifier, unique within one wallet
        type: Credential type (e.g. "vaccination")
        iss: Issuer identifier
        sig: Issuer signature, opaque to the wallet
        attributes: Attribute values, all carried as text
        issued_at: When the credential entered the wallet (set on import)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Credential identifier")
    type: str = Field(..., min_length=1, description="Credential type")
    iss: str = Field(..., min_length=1, description="Issuer identifier")
    sig: str = Field(..., min_length=1, description="Issuer signature")
    attributes: Dict[str, str] = Field(default_factory=dict, description="Attribute values")
    issued_at: Optional[datetime] = Field(None, alias="issuedAt", description="Import time")

    def with_issued_at(self, when: datetime) -> "Credential":
        return self.model_copy(update={"issued_at": when})


@dataclass(frozen=True)
class InvalidCredential:
    """Credential is missing signing fields or carries unusable attribute values"""

    message: str = ""
    missing_fields: Tuple[str, ...] = field(default_factory=tuple)


def derive_credential_id(iss: str, sig: str) -> str:
    """Deterministic id for offers that do not carry one"""
    digest = hashlib.sha256(f"{iss}\n{sig}".encode("utf-8")).hexdigest()
    return f"cred-{digest[:32]}"


def _attribute_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def credential_from_payload(payload: Mapping[str, Any]) -> Result[Credential, InvalidCredential]:
    """
    Build a credential from its flat JSON form.

    Args:
        payload: Mapping with at least non-empty type, iss and sig

    Returns:
        Success(Credential) or Failure(InvalidCredential)
    """
    missing = tuple(
        name
        for name in REQUIRED_FIELDS
        if not isinstance(payload.get(name), str) or not payload[name].strip()
    )
    if missing:
        return Failure(
            InvalidCredential(
                message=f"Invalid credential format: missing {', '.join(missing)}",
                missing_fields=missing,
            )
        )

    attributes: Dict[str, str] = {}
    for name, raw in payload.items():
        if name in RESERVED_FIELDS:
            continue
        text = _attribute_text(raw)
        if text is None:
            return Failure(
                InvalidCredential(message=f"Attribute {name!r} must be a string, number or boolean")
            )
        attributes[name] = text

    credential_id = payload.get("id")
    if credential_id is not None and not isinstance(credential_id, (str, int)):
        return Failure(InvalidCredential(message="Credential id must be a string"))
    if credential_id is None or not str(credential_id).strip():
        credential_id = derive_credential_id(payload["iss"], payload["sig"])

    issued_at = None
    if payload.get("issuedAt"):
        try:
            issued_at = parse_timestamp(payload["issuedAt"])
        except (TypeError, ValueError):
            return Failure(InvalidCredential(message=f"Invalid issuedAt: {payload['issuedAt']!r}"))

    return Success(
        Credential(
            id=str(credential_id),
            type=payload["type"],
            iss=payload["iss"],
            sig=payload["sig"],
            attributes=attributes,
            issued_at=issued_at,
        )
    )


def credential_to_payload(credential: Credential, include_issued_at: bool = False) -> Dict[str, Any]:
    """
    Flatten a credential into its JSON form.

    Attributes named like a reserved field are dropped so they can never
    overwrite the signing fields.
    """
    payload: Dict[str, Any] = {
        name: value for name, value in credential.attributes.items() if name not in RESERVED_FIELDS
    }
    payload.update(
        {
            "id": credential.id,
            "type": credential.type,
            "iss": credential.iss,
            "sig": credential.sig,
        }
    )
    if include_issued_at and credential.issued_at is not None:
        payload["issuedAt"] = credential.issued_at.isoformat()
    return payload
