"""Verifier and wallet client side of the backend API"""

from mediguard.client.api_client import (
    ApiClientError,
    ApiError,
    BackendUnavailable,
    CreatedRequest,
    IssuedCredential,
    MediguardApiClient,
    ProofOutcome,
    SessionStatusReport,
)
from mediguard.client.status_poller import SessionStatusPoller

__all__ = [
    "ApiClientError",
    "ApiError",
    "BackendUnavailable",
    "CreatedRequest",
    "IssuedCredential",
    "MediguardApiClient",
    "ProofOutcome",
    "SessionStatusReport",
    "SessionStatusPoller",
]
