"""Output ports - Interfaces for external dependencies"""

from mediguard.port.output.session_repository import (
    AuditTrail,
    SessionNotFound,
    SessionRepository,
)
from mediguard.port.output.signature_service import (
    ProofCheck,
    SignatureError,
    SignatureService,
    SignedAttributes,
    SigningError,
    UnknownIssuer,
)
from mediguard.port.output.qrcode_service import (
    QrCodeService,
    QrCodeFormat,
    QrCodeError,
)

__all__ = [
    # Session Repository
    "SessionRepository",
    "SessionNotFound",
    "AuditTrail",
    # Signature Service
    "SignatureService",
    "SignatureError",
    "SigningError",
    "UnknownIssuer",
    "SignedAttributes",
    "ProofCheck",
    # QR Code Service
    "QrCodeService",
    "QrCodeFormat",
    "QrCodeError",
]
