"""Output adapters - Infrastructure implementations of output ports"""

from mediguard.adapter.output.persistence import InMemoryAuditTrail, InMemorySessionRepository
from mediguard.adapter.output.jose import JoseSignatureService
from mediguard.adapter.output.qrcode import QrCodeServiceImpl

__all__ = [
    "InMemorySessionRepository",
    "InMemoryAuditTrail",
    "JoseSignatureService",
    "QrCodeServiceImpl",
]
