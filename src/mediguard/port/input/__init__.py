"""Input ports - Use case interfaces"""

from mediguard.port.input.create_session import (
    CreateSession,
    CreateSessionRequest,
    CreateSessionResponse,
    CreateSessionError,
)
from mediguard.port.input.record_audit import (
    RecordAudit,
    RecordAuditRequest,
    RecordAuditError,
)
from mediguard.port.input.list_audit import (
    ListAudit,
    ListAuditRequest,
    ListAuditResponse,
    ListAuditError,
)
from mediguard.port.input.get_session_status import (
    GetSessionStatus,
    GetSessionStatusRequest,
    GetSessionStatusResponse,
    GetSessionStatusError,
    StatusSessionNotFound,
)
from mediguard.port.input.verify_proof import (
    VerifyProof,
    VerifyProofRequest,
    VerifyProofResponse,
    VerifyProofError,
    ProofSessionNotFound,
)
from mediguard.port.input.issue_credential import (
    IssueCredential,
    IssueCredentialRequest,
    IssueCredentialResponse,
    IssueCredentialError,
)

__all__ = [
    # Create Session
    "CreateSession",
    "CreateSessionRequest",
    "CreateSessionResponse",
    "CreateSessionError",
    # Record Audit
    "RecordAudit",
    "RecordAuditRequest",
    "RecordAuditError",
    # List Audit
    "ListAudit",
    "ListAuditRequest",
    "ListAuditResponse",
    "ListAuditError",
    # Get Session Status
    "GetSessionStatus",
    "GetSessionStatusRequest",
    "GetSessionStatusResponse",
    "GetSessionStatusError",
    "StatusSessionNotFound",
    # Verify Proof
    "VerifyProof",
    "VerifyProofRequest",
    "VerifyProofResponse",
    "VerifyProofError",
    "ProofSessionNotFound",
    # Issue Credential
    "IssueCredential",
    "IssueCredentialRequest",
    "IssueCredentialResponse",
    "IssueCredentialError",
]
