"""Scannable code scheme

Codes shown to the holder carry a URI under a dedicated custom scheme. Two
intents are recognised, selected by the host token:

- mediguard://verify?req=<request_id>            satisfy a verification request
- mediguard://credential?payload=<url-encoded JSON>  import a credential

Decoding is pure and never touches storage. Encoding is the exact inverse of
decoding, modulo percent-encoding of the query values.
"""

import json
from dataclasses import dataclass
from typing import Final, List, Optional, Union
from urllib.parse import parse_qs, quote, urlencode, urlsplit

from returns.result import Failure, Result, Success

from mediguard.domain.credential import Credential, credential_from_payload, credential_to_payload
from mediguard.domain.value_objects import DEFAULT_CODE_SCHEME, RequestId


VERIFY_INTENT: Final[str] = "verify"
CREDENTIAL_INTENT: Final[str] = "credential"


# ======================
# Scan Intents (Sealed Interface)
# ======================


@dataclass(frozen=True)
class SubmitProof:
    """The code asks the holder to prove a predicate for a verification session"""

    request_id: RequestId


@dataclass(frozen=True)
class ImportCredential:
    """The code offers a credential for import into the wallet"""

    credential: Credential


ScanIntent = Union[SubmitProof, ImportCredential]


# ======================
# Error Types
# ======================


@dataclass(frozen=True)
class CodeSchemeError:
    """Base error type for code decoding"""

    message: str = ""


@dataclass(frozen=True)
class MalformedCode(CodeSchemeError):
    """Scanned text is not a code of this scheme"""


@dataclass(frozen=True)
class NotMediguardCode(MalformedCode):
    """Scanned text is not a well-formed URI"""

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", "Not a valid MediGuard code")


@dataclass(frozen=True)
class WrongScheme(MalformedCode):
    """URI uses another scheme (e.g. a plain web link)"""

    expected: str = ""
    actual: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "message",
            f"Invalid protocol {self.actual}:. Must be {self.expected}://",
        )


@dataclass(frozen=True)
class UnrecognizedIntent(CodeSchemeError):
    """URI uses the right scheme but names no known action"""

    token: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", f"Unknown MediGuard action: {self.token!r}")


@dataclass(frozen=True)
class MissingField(CodeSchemeError):
    """A required query parameter is absent or empty"""

    field_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", f"Missing required parameter: {self.field_name}")


@dataclass(frozen=True)
class MalformedPayload(CodeSchemeError):
    """Credential payload is not JSON or lacks the signing fields"""

    reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "message", f"Malformed credential payload: {self.reason}")


# ======================
# Encoding
# ======================


def encode_verify(request_id: Union[RequestId, str], scheme: str = DEFAULT_CODE_SCHEME) -> str:
    """Build the verification-intent URI for a session"""
    query = urlencode({"req": str(request_id)}, quote_via=quote)
    return f"{scheme}://{VERIFY_INTENT}?{query}"


def encode_credential_offer(credential: Credential, scheme: str = DEFAULT_CODE_SCHEME) -> str:
    """Build the credential-import URI carrying the credential's flat JSON form"""
    payload = json.dumps(
        credential_to_payload(credential),
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
    )
    query = urlencode({"payload": payload}, quote_via=quote)
    return f"{scheme}://{CREDENTIAL_INTENT}?{query}"


# ======================
# Decoding
# ======================


def _first(params: dict, name: str) -> Optional[str]:
    values: List[str] = params.get(name, [])
    if not values or not values[0].strip():
        return None
    return values[0]


def decode(raw: str, scheme: str = DEFAULT_CODE_SCHEME) -> Result[ScanIntent, CodeSchemeError]:
    """
    Classify a scanned string.

    Args:
        raw: Text read from the code
        scheme: Expected URI scheme token

    Returns:
        Success(SubmitProof | ImportCredential) or Failure(CodeSchemeError)
    """
    if not isinstance(raw, str) or not raw.strip():
        return Failure(NotMediguardCode())

    try:
        parts = urlsplit(raw.strip())
    except ValueError:
        return Failure(NotMediguardCode())

    if not parts.scheme:
        return Failure(NotMediguardCode())

    expected = scheme.lower()
    if parts.scheme != expected:
        return Failure(WrongScheme(expected=expected, actual=parts.scheme))

    token = (parts.netloc or parts.path.strip("/")).lower()
    params = parse_qs(parts.query, keep_blank_values=True)

    if token == VERIFY_INTENT:
        request_id = _first(params, "req")
        if request_id is None:
            return Failure(MissingField(field_name="req"))
        return Success(SubmitProof(request_id=RequestId(value=request_id)))

    if token == CREDENTIAL_INTENT:
        payload_text = _first(params, "payload")
        if payload_text is None:
            return Failure(MissingField(field_name="payload"))
        try:
            payload = json.loads(payload_text)
        except json.JSONDecodeError as e:
            return Failure(MalformedPayload(reason=f"not valid JSON ({e.msg})"))
        if not isinstance(payload, dict):
            return Failure(MalformedPayload(reason="expected a JSON object"))

        credential_result = credential_from_payload(payload)
        if isinstance(credential_result, Failure):
            return Failure(MalformedPayload(reason=credential_result.failure().message))
        return Success(ImportCredential(credential=credential_result.unwrap()))

    return Failure(UnrecognizedIntent(token=token))
