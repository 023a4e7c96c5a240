"""Adapter layer - Infrastructure implementations"""

from mediguard.adapter.output import (
    InMemoryAuditTrail,
    InMemorySessionRepository,
    JoseSignatureService,
    QrCodeServiceImpl,
)

__all__ = [
    "InMemorySessionRepository",
    "InMemoryAuditTrail",
    "JoseSignatureService",
    "QrCodeServiceImpl",
]
