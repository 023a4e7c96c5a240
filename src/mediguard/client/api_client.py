"""MediGuard backend API client.

httpx-based async client used by verifier frontends and wallets.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx
from returns.result import Failure, Result, Success

from mediguard.domain import (
    AuditRecord,
    Credential,
    Predicate,
    ProviderId,
    RequestId,
    SessionStatus,
    VerificationId,
    parse_timestamp,
)

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


class ApiClientError(Exception):
    """Base error of the API client"""

    pass


class BackendUnavailable(ApiClientError):
    """The backend could not be reached (connection error, timeout)"""

    pass


class ApiError(ApiClientError):
    """The backend answered with an error status"""

    def __init__(self, status_code: int, error: str, description: str):
        self.status_code = status_code
        self.error = error
        self.description = description
        super().__init__(f"HTTP {status_code} {error}: {description}")


@dataclass(frozen=True)
class CreatedRequest:
    """Session opened by create_request"""

    request_id: RequestId
    qr_code_data: str
    predicate_human_readable: str
    created_at: datetime


@dataclass(frozen=True)
class ProofOutcome:
    verified: bool
    timestamp: datetime
    verification_id: VerificationId
    reason: Optional[str] = None


@dataclass(frozen=True)
class SessionStatusReport:
    request_id: RequestId
    status: SessionStatus
    attempts: int
    verification_id: Optional[VerificationId] = None


@dataclass(frozen=True)
class IssuedCredential:
    credential: Credential
    issuer_public_key: str
    credential_offer_uri: str


class MediguardApiClient:
    """Async HTTP client for the MediGuard backend.

    Use as an async context manager. Every call returns a Result; transport
    failures come back as Failure(BackendUnavailable) and error statuses as
    Failure(ApiError), so callers can surface them and stay retryable.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            base_url: Backend base URL
            timeout: Request timeout in seconds
            transport: Custom transport (e.g. httpx.ASGITransport for in-process use)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "MediguardApiClient":
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _call(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Result[T, ApiClientError]:
        if not self._client:
            return Failure(ApiClientError("Client not initialized"))

        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TimeoutException:
            log.error("%s %s timed out", method, path)
            return Failure(BackendUnavailable(f"{method} {path}: timeout"))
        except httpx.TransportError as e:
            log.error("%s %s failed: %s", method, path, e)
            return Failure(BackendUnavailable(f"{method} {path}: {e}"))

        if response.is_success:
            try:
                return Success(parse(response.json()))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                log.warning("%s %s returned an unexpected body: %s", method, path, e)
                return Failure(
                    ApiError(response.status_code, "invalid_response", f"Unexpected response body: {e!r}")
                )

        log.warning("%s %s returned %s", method, path, response.status_code)
        error, description = f"http_{response.status_code}", response.reason_phrase
        try:
            detail = response.json().get("detail")
            if isinstance(detail, dict):
                error = detail.get("error", error)
                description = detail.get("error_description", description)
            elif detail:
                description = str(detail)
        except (ValueError, AttributeError):
            pass
        return Failure(ApiError(response.status_code, error, description))

    # Provider

    async def create_request(
        self, provider_id: str, provider_name: str, predicate: Predicate, provider_type: str = "verifier"
    ) -> Result[CreatedRequest, ApiClientError]:
        return await self._call(
            "POST",
            "/api/provider/request",
            _created_request,
            json={
                "provider_id": provider_id,
                "provider_name": provider_name,
                "provider_type": provider_type,
                "predicate": predicate.model_dump(mode="json"),
            },
        )

    async def create_request_from_catalog(
        self, provider_id: str, provider_name: str, predicate_key: str, provider_type: str = "verifier"
    ) -> Result[CreatedRequest, ApiClientError]:
        return await self._call(
            "POST",
            "/api/provider/request/catalog",
            _created_request,
            json={
                "provider_id": provider_id,
                "provider_name": provider_name,
                "provider_type": provider_type,
                "predicate_key": predicate_key,
            },
        )

    async def submit_proof(
        self,
        request_id: RequestId,
        proof: str,
        revealed_attributes: Dict[str, str],
        issuer_public_key: str,
    ) -> Result[ProofOutcome, ApiClientError]:
        return await self._call(
            "POST",
            "/api/provider/verify",
            lambda data: ProofOutcome(
                verified=data["verified"],
                timestamp=parse_timestamp(data["timestamp"]),
                verification_id=VerificationId(value=data["verification_id"]),
                reason=data.get("reason"),
            ),
            json={
                "request_id": str(request_id),
                "proof": proof,
                "revealed_attributes": revealed_attributes,
                "issuer_public_key": issuer_public_key,
            },
        )

    async def list_audit(self, provider_id: ProviderId, limit: int = 50) -> Result[List[AuditRecord], ApiClientError]:
        """
        Fetch a provider's audit feed.

        The feed is newest-first; records get descending sequence numbers so
        the order survives timestamp ties. Records without request_id (or with
        a null one) are returned with request_id None. A body that is not a
        well-formed feed comes back as Failure(ApiError("invalid_response")).
        """
        return await self._call(
            "GET",
            f"/api/provider/{provider_id}/audit",
            lambda data: _audit_records(provider_id, data),
            params={"limit": limit},
        )

    async def get_session_status(self, request_id: RequestId) -> Result[SessionStatusReport, ApiClientError]:
        return await self._call(
            "GET",
            f"/api/provider/request/{request_id}/status",
            lambda data: SessionStatusReport(
                request_id=RequestId(value=data["request_id"]),
                status=SessionStatus(data["status"]),
                attempts=data["attempts"],
                verification_id=VerificationId(value=data["verification_id"]) if data.get("verification_id") else None,
            ),
        )

    # Hospital

    async def register_issuer(self, hospital_id: str) -> Result[str, ApiClientError]:
        """Returns the issuer public key"""
        return await self._call(
            "POST", "/api/hospital/init", lambda data: data["public_key"], json={"hospital_id": hospital_id}
        )

    async def get_public_key(self, hospital_id: str) -> Result[str, ApiClientError]:
        return await self._call("GET", f"/api/hospital/{hospital_id}/public-key", lambda data: data["public_key"])

    async def issue_credential(
        self, credential_type: str, attributes: Dict[str, str], hospital_id: Optional[str] = None
    ) -> Result[IssuedCredential, ApiClientError]:
        payload: Dict[str, Any] = {"credential_type": credential_type, "attributes": attributes}
        if hospital_id:
            payload["hospital_id"] = hospital_id

        return await self._call(
            "POST",
            "/api/hospital/issue",
            lambda data: IssuedCredential(
                credential=Credential(
                    id=data["credential_id"],
                    type=data["credential_type"],
                    iss=data["hospital_id"],
                    sig=data["signature"],
                    attributes=data["attributes"],
                ),
                issuer_public_key=data["issuer_public_key"],
                credential_offer_uri=data["credential_offer_uri"],
            ),
            json=payload,
        )


def _created_request(data: Dict[str, Any]) -> CreatedRequest:
    return CreatedRequest(
        request_id=RequestId(value=data["request_id"]),
        qr_code_data=data["qr_code_data"],
        predicate_human_readable=data["predicate_human_readable"],
        created_at=parse_timestamp(data["created_at"]),
    )


def _audit_records(provider_id: ProviderId, data: Dict[str, Any]) -> List[AuditRecord]:
    items = data["verifications"]
    records = []
    for index, item in enumerate(items):
        request_id = item.get("request_id")
        records.append(
            AuditRecord(
                verification_id=VerificationId(value=item["verification_id"]),
                provider_id=provider_id,
                verified=bool(item["verified"]),
                predicate_human_readable=item["predicate_human_readable"],
                timestamp=parse_timestamp(item["timestamp"]),
                request_id=RequestId(value=request_id) if request_id else None,
                sequence=len(items) - index,
            )
        )
    return records
