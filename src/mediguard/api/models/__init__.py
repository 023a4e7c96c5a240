"""API models - Request and response DTOs"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from mediguard.domain import Predicate, SessionStatus


class CreateRequestRequestModel(BaseModel):
    """Request to open a verification session"""

    provider_id: str = Field(..., min_length=1, description="Provider identifier")
    provider_name: str = Field(..., min_length=1, description="Provider display name")
    provider_type: str = Field("verifier", min_length=1, description="Provider kind")
    predicate: Predicate = Field(..., description="Predicate the holder must prove")


class CreateCatalogRequestRequestModel(BaseModel):
    """Request to open a verification session from a catalog predicate"""

    provider_id: str = Field(..., min_length=1, description="Provider identifier")
    provider_name: str = Field(..., min_length=1, description="Provider display name")
    provider_type: str = Field("verifier", min_length=1, description="Provider kind")
    predicate_key: str = Field(..., description="Catalog key, e.g. age_18")


class CreateRequestResponseModel(BaseModel):
    """Response from session creation"""

    request_id: str = Field(..., description="Session identifier")
    qr_code_data: str = Field(..., description="Code payload to render as QR")
    predicate_human_readable: str = Field(..., description="Rendering of the predicate")
    predicate: Predicate = Field(..., description="Structured predicate")
    created_at: datetime = Field(..., description="Creation time")
    qr_code_url: Optional[str] = Field(None, description="URL of the rendered QR image")


class CatalogEntryModel(BaseModel):
    key: str
    predicate: Predicate
    predicate_human_readable: str


class CatalogResponseModel(BaseModel):
    entries: List[CatalogEntryModel]


class VerifyProofRequestModel(BaseModel):
    """Proof submitted by a holder"""

    request_id: str = Field(..., min_length=1, description="Session identifier")
    proof: str = Field(..., min_length=1, description="Opaque serialized proof")
    revealed_attributes: Dict[str, str] = Field(default_factory=dict, description="Disclosed attributes")
    issuer_public_key: str = Field(..., min_length=1, description="Issuer public key")


class VerifyProofResponseModel(BaseModel):
    verified: bool
    timestamp: datetime
    verification_id: str
    reason: Optional[str] = None


class AuditRecordModel(BaseModel):
    """One entry of the audit feed"""

    verification_id: str
    verified: bool
    predicate_human_readable: str
    timestamp: datetime
    request_id: Optional[str] = None


class AuditListResponseModel(BaseModel):
    provider_id: str
    verifications: List[AuditRecordModel]


class SessionStatusResponseModel(BaseModel):
    request_id: str
    status: SessionStatus
    attempts: int
    verification_id: Optional[str] = None
    decided_at: Optional[datetime] = None


class IssuerInitRequestModel(BaseModel):
    hospital_id: str = Field(..., min_length=1, description="Issuer identifier")
    hospital_name: Optional[str] = Field(None, description="Issuer display name")


class IssuerKeyResponseModel(BaseModel):
    hospital_id: str
    public_key: str


class IssueCredentialRequestModel(BaseModel):
    """Request to issue a signed credential"""

    hospital_id: Optional[str] = Field(None, description="Issuer identifier (default issuer if omitted)")
    credential_type: str = Field(..., min_length=1, description="Credential type")
    attributes: Dict[str, str] = Field(..., description="Attribute values to sign")
    credential_id: Optional[str] = Field(None, description="Explicit credential id")


class IssueCredentialResponseModel(BaseModel):
    credential_id: str
    credential_type: str
    hospital_id: str
    signature: str
    issuer_public_key: str
    attributes: Dict[str, str]
    credential_offer_uri: str


class ErrorResponseModel(BaseModel):
    """Standard error response"""

    error: str = Field(..., description="Error code")
    error_description: str = Field(..., description="Human-readable error description")
