"""Dependency injection container for FastAPI"""

from typing import Optional

from mediguard.adapter import (
    InMemoryAuditTrail,
    InMemorySessionRepository,
    JoseSignatureService,
    QrCodeServiceImpl,
)
from mediguard.application import (
    CreateSessionImpl,
    GetSessionStatusImpl,
    IssueCredentialImpl,
    ListAuditImpl,
    RecordAuditImpl,
    VerifyProofImpl,
)
from mediguard.config import load_or_create_config
from mediguard.domain import Clock, MediguardConfig, SystemClock
from mediguard.port.input import (
    CreateSession,
    GetSessionStatus,
    IssueCredential,
    ListAudit,
    RecordAudit,
    VerifyProof,
)
from mediguard.port.output import (
    AuditTrail,
    QrCodeService,
    SessionRepository,
    SignatureService,
)


class DependencyContainer:
    """
    Dependency injection container for the MediGuard backend.

    Manages singleton instances of services and use cases.
    """

    def __init__(self, config: Optional[MediguardConfig] = None, clock: Optional[Clock] = None):
        """
        Args:
            config: Configuration (loaded from the environment if None)
            clock: Clock (system clock if None)
        """
        self._config = config
        self._clock = clock
        self._session_repository: Optional[SessionRepository] = None
        self._audit_trail: Optional[AuditTrail] = None
        self._signature_service: Optional[SignatureService] = None
        self._qrcode_service: Optional[QrCodeService] = None
        self._create_session: Optional[CreateSession] = None
        self._record_audit: Optional[RecordAudit] = None
        self._list_audit: Optional[ListAudit] = None
        self._get_session_status: Optional[GetSessionStatus] = None
        self._verify_proof: Optional[VerifyProof] = None
        self._issue_credential: Optional[IssueCredential] = None

    def get_config(self) -> MediguardConfig:
        if self._config is None:
            self._config = load_or_create_config()
        return self._config

    def get_clock(self) -> Clock:
        if self._clock is None:
            self._clock = SystemClock()
        return self._clock

    def get_session_repository(self) -> SessionRepository:
        if self._session_repository is None:
            self._session_repository = InMemorySessionRepository()
        return self._session_repository

    def get_audit_trail(self) -> AuditTrail:
        if self._audit_trail is None:
            self._audit_trail = InMemoryAuditTrail(clock=self.get_clock())
        return self._audit_trail

    def get_signature_service(self) -> SignatureService:
        if self._signature_service is None:
            self._signature_service = JoseSignatureService(clock=self.get_clock())
        return self._signature_service

    def get_qrcode_service(self) -> QrCodeService:
        if self._qrcode_service is None:
            self._qrcode_service = QrCodeServiceImpl()
        return self._qrcode_service

    def get_create_session(self) -> CreateSession:
        if self._create_session is None:
            self._create_session = CreateSessionImpl(
                repository=self.get_session_repository(),
                config=self.get_config(),
                clock=self.get_clock(),
            )
        return self._create_session

    def get_record_audit(self) -> RecordAudit:
        if self._record_audit is None:
            self._record_audit = RecordAuditImpl(audit_trail=self.get_audit_trail())
        return self._record_audit

    def get_list_audit(self) -> ListAudit:
        if self._list_audit is None:
            self._list_audit = ListAuditImpl(audit_trail=self.get_audit_trail(), config=self.get_config())
        return self._list_audit

    def get_get_session_status(self) -> GetSessionStatus:
        if self._get_session_status is None:
            self._get_session_status = GetSessionStatusImpl(
                repository=self.get_session_repository(),
                audit_trail=self.get_audit_trail(),
            )
        return self._get_session_status

    def get_verify_proof(self) -> VerifyProof:
        if self._verify_proof is None:
            self._verify_proof = VerifyProofImpl(
                repository=self.get_session_repository(),
                signature_service=self.get_signature_service(),
                record_audit=self.get_record_audit(),
            )
        return self._verify_proof

    def get_issue_credential(self) -> IssueCredential:
        if self._issue_credential is None:
            self._issue_credential = IssueCredentialImpl(
                signature_service=self.get_signature_service(),
                config=self.get_config(),
            )
        return self._issue_credential


# Global container instance
_container: Optional[DependencyContainer] = None


def get_container() -> DependencyContainer:
    """Get or create global dependency container"""
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def set_container(container: DependencyContainer) -> None:
    """Set global dependency container (useful for testing)"""
    global _container
    _container = container


# FastAPI dependency functions
def get_create_session_use_case() -> CreateSession:
    return get_container().get_create_session()


def get_list_audit_use_case() -> ListAudit:
    return get_container().get_list_audit()


def get_get_session_status_use_case() -> GetSessionStatus:
    return get_container().get_get_session_status()


def get_verify_proof_use_case() -> VerifyProof:
    return get_container().get_verify_proof()


def get_issue_credential_use_case() -> IssueCredential:
    return get_container().get_issue_credential()


def get_session_repository() -> SessionRepository:
    return get_container().get_session_repository()


def get_signature_service() -> SignatureService:
    return get_container().get_signature_service()


def get_qrcode_service() -> QrCodeService:
    return get_container().get_qrcode_service()


def get_config() -> MediguardConfig:
    return get_container().get_config()
