"""Deployment configuration

Timing constants for the session protocol (polling interval, correlation
window, scan cool-down), the code scheme token, and backend settings.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mediguard.domain.value_objects import DEFAULT_CODE_SCHEME


class MediguardConfig(BaseModel):
    """
    Configuration shared by the backend, the verifier client and the wallet.

    Attributes:
        code_scheme: URI scheme token of scannable codes
        public_url: Base URL of the backend API
        default_issuer_id: Issuer used when a request names none
        correlation_window_seconds: Max age of an audit record the time window rule accepts
        poll_interval_seconds: Delay between two audit polls
        scan_cooldown_seconds: Scanner pause after a handled code
        audit_list_limit: Max number of records an audit listing returns
        audit_exposes_request_id: Whether listed audit records carry request_id
        inactivity_timeout_seconds: Give up polling after this long (None polls forever)
        wallet_store_path: JSON file backing the wallet (None keeps it in memory)
    """

    code_scheme: str = Field(DEFAULT_CODE_SCHEME, min_length=1, description="URI scheme token")
    public_url: str = Field("http://localhost:8000", description="Backend base URL")
    default_issuer_id: str = Field("demo_issuer", min_length=1, description="Default issuer id")
    correlation_window_seconds: float = Field(5.0, gt=0, description="Correlation window")
    poll_interval_seconds: float = Field(2.0, gt=0, description="Polling interval")
    scan_cooldown_seconds: float = Field(1.5, ge=0, description="Scanner cool-down")
    audit_list_limit: int = Field(50, ge=1, le=1000, description="Audit listing cap")
    audit_exposes_request_id: bool = Field(True, description="Expose request_id on audit records")
    inactivity_timeout_seconds: Optional[float] = Field(None, gt=0, description="Polling timeout")
    wallet_store_path: Optional[str] = Field(None, description="Wallet JSON file path")

    @field_validator("code_scheme")
    @classmethod
    def validate_code_scheme(cls, v: str) -> str:
        """Scheme must be a valid URI scheme token that is not http(s)"""
        token = v.strip().lower()
        if not token[:1].isalpha() or not all(c.isalnum() or c in "+-." for c in token):
            raise ValueError(f"Invalid URI scheme token: {v!r}")
        if token in ("http", "https"):
            raise ValueError("code_scheme must be a custom scheme, not http/https")
        return token

    @field_validator("public_url")
    @classmethod
    def validate_public_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"public_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_timeout_exceeds_interval(self) -> "MediguardConfig":
        if (
            self.inactivity_timeout_seconds is not None
            and self.inactivity_timeout_seconds < self.poll_interval_seconds
        ):
            raise ValueError("inactivity_timeout_seconds must be at least poll_interval_seconds")
        return self

    @property
    def correlation_window(self) -> timedelta:
        return timedelta(seconds=self.correlation_window_seconds)

    @property
    def scan_cooldown(self) -> timedelta:
        return timedelta(seconds=self.scan_cooldown_seconds)

    @property
    def inactivity_timeout(self) -> Optional[timedelta]:
        if self.inactivity_timeout_seconds is None:
            return None
        return timedelta(seconds=self.inactivity_timeout_seconds)
