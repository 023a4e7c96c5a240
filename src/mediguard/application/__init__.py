"""Application layer - Use case implementations

This layer contains the business logic that orchestrates domain objects
and interacts with external services through ports.
"""

from mediguard.application.create_session_impl import CreateSessionImpl
from mediguard.application.record_audit_impl import RecordAuditImpl
from mediguard.application.list_audit_impl import ListAuditImpl
from mediguard.application.get_session_status_impl import GetSessionStatusImpl
from mediguard.application.verify_proof_impl import VerifyProofImpl
from mediguard.application.issue_credential_impl import IssueCredentialImpl

__all__ = [
    "CreateSessionImpl",
    "RecordAuditImpl",
    "ListAuditImpl",
    "GetSessionStatusImpl",
    "VerifyProofImpl",
    "IssueCredentialImpl",
]
