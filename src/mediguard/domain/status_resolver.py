"""Session status resolution from the audit feed

The verifier learns the outcome of its active session by reading the
provider's audit feed; there is no push channel. Attribution of a record to
the session follows two rules, in order:

1. Exact match. A record carrying the session's request_id settles the
   session when it is verified. A failed attempt is reported but leaves the
   session WAITING, since the holder may scan again and retry. Records
   carrying another request_id are never attributed to this session.
2. Time window fallback, for feeds that omit request_id. Only the newest
   record is considered, and only if it carries no request_id: the session
   is VERIFIED when that record is verified, was written after polling
   started, and is no older than the correlation window.

The fallback assumes at most one verification completes per provider inside
the window. When several id-less verified records fall inside it the
resolution carries a CorrelationAmbiguous marker.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Final, Iterable, Optional

from mediguard.domain.session import AuditRecord, newest_first
from mediguard.domain.value_objects import RequestId


class ResolverState(str, Enum):
    """Verifier-side state of the active session"""

    WAITING: Final[str] = "waiting"
    VERIFIED: Final[str] = "verified"
    ABANDONED: Final[str] = "abandoned"
    TIMED_OUT: Final[str] = "timed_out"

    def __str__(self) -> str:
        return self.value


class MatchKind(str, Enum):
    REQUEST_ID: Final[str] = "request_id"
    TIME_WINDOW: Final[str] = "time_window"


@dataclass(frozen=True)
class CorrelationAmbiguous:
    """Several records could belong to the session; the newest one was used"""

    candidates: int = 0
    message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "message",
            f"{self.candidates} verified records without request_id inside the correlation window",
        )


@dataclass(frozen=True)
class Resolution:
    """
    Result of one resolution step.

    Attributes:
        state: WAITING or VERIFIED
        matched_record: Record that settled the session
        matched_by: Which rule matched
        failed_attempt: Latest failed attempt carrying this session's request_id
        ambiguity: Set when the time window rule had several candidates
    """

    state: ResolverState
    matched_record: Optional[AuditRecord] = None
    matched_by: Optional[MatchKind] = None
    failed_attempt: Optional[AuditRecord] = None
    ambiguity: Optional[CorrelationAmbiguous] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != ResolverState.WAITING


def _inside_window(
    record: AuditRecord, polling_started_at: datetime, now: datetime, window: timedelta
) -> bool:
    return record.timestamp >= polling_started_at and now - record.timestamp <= window


def resolve(
    request_id: RequestId,
    polling_started_at: datetime,
    records: Iterable[AuditRecord],
    now: datetime,
    window: timedelta,
) -> Resolution:
    """
    Decide whether the audit feed shows the session as verified.

    Args:
        request_id: Session being polled
        polling_started_at: When polling for this session began
        records: Audit records for the provider, any order
        now: Current time
        window: Correlation window for the fallback rule

    Returns:
        Resolution in state VERIFIED or WAITING
    """
    ordered = newest_first(records)

    own = [r for r in ordered if r.request_id == request_id]
    for record in own:
        if record.verified:
            return Resolution(
                state=ResolverState.VERIFIED,
                matched_record=record,
                matched_by=MatchKind.REQUEST_ID,
            )
    failed_attempt = own[0] if own else None

    if not ordered or ordered[0].request_id is not None:
        return Resolution(state=ResolverState.WAITING, failed_attempt=failed_attempt)

    newest = ordered[0]
    if newest.verified and _inside_window(newest, polling_started_at, now, window):
        candidates = sum(
            1
            for r in ordered
            if r.request_id is None and r.verified and _inside_window(r, polling_started_at, now, window)
        )
        return Resolution(
            state=ResolverState.VERIFIED,
            matched_record=newest,
            matched_by=MatchKind.TIME_WINDOW,
            ambiguity=CorrelationAmbiguous(candidates=candidates) if candidates > 1 else None,
        )

    return Resolution(state=ResolverState.WAITING, failed_attempt=failed_attempt)
