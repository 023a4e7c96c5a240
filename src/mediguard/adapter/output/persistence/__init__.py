from mediguard.adapter.output.persistence.in_memory_repository import (
    DuplicateSession,
    InMemoryAuditTrail,
    InMemorySessionRepository,
)

__all__ = ["DuplicateSession", "InMemoryAuditTrail", "InMemorySessionRepository"]
