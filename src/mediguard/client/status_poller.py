"""Verifier-side polling of the audit feed for one active session"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from returns.result import Failure

from mediguard.client.api_client import MediguardApiClient
from mediguard.domain import (
    AuditRecord,
    Clock,
    MediguardConfig,
    ProviderId,
    RequestId,
    Resolution,
    ResolverState,
    resolve,
)

log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class SessionStatusPoller:
    """
    Polls a provider's audit feed until the session resolves.

    The poller ends in VERIFIED, ABANDONED (cancel() was called) or
    TIMED_OUT (no activity for inactivity_timeout). Feed fetch failures are
    logged and retried on the next tick. Abandoning is local; the backend is
    never told.

    Args:
        client: Open API client
        provider_id: Provider whose feed is polled
        request_id: Session being resolved
        clock: Clock used for the correlation window and the timeout
        poll_interval: Seconds between feed fetches
        window: Correlation window of the time-window rule
        inactivity_timeout: Give up after this long without activity (None: never)
        audit_limit: Records fetched per poll
        sleep: Waits between polls (defaults to a wait that cancel() interrupts)
    """

    def __init__(
        self,
        client: MediguardApiClient,
        provider_id: ProviderId,
        request_id: RequestId,
        clock: Clock,
        poll_interval: float = 2.0,
        window: timedelta = timedelta(seconds=5),
        inactivity_timeout: Optional[timedelta] = None,
        audit_limit: int = 50,
        sleep: Optional[Sleep] = None,
    ):
        self.client = client
        self.provider_id = provider_id
        self.request_id = request_id
        self.clock = clock
        self.poll_interval = poll_interval
        self.window = window
        self.inactivity_timeout = inactivity_timeout
        self.audit_limit = audit_limit
        self._sleep = sleep or self._interruptible_sleep
        self._cancelled = asyncio.Event()
        self.polls = 0
        self.last_failed_attempt: Optional[AuditRecord] = None

    @classmethod
    def from_config(
        cls,
        config: MediguardConfig,
        client: MediguardApiClient,
        provider_id: ProviderId,
        request_id: RequestId,
        clock: Clock,
        sleep: Optional[Sleep] = None,
    ) -> "SessionStatusPoller":
        """Poller using the configured interval, correlation window, timeout and listing cap"""
        return cls(
            client,
            provider_id,
            request_id,
            clock,
            poll_interval=config.poll_interval_seconds,
            window=config.correlation_window,
            inactivity_timeout=config.inactivity_timeout,
            audit_limit=config.audit_list_limit,
            sleep=sleep,
        )

    def cancel(self) -> None:
        """Abandon the session; the running poll loop ends ABANDONED"""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    async def run(self) -> Resolution:
        """
        Poll until the session leaves WAITING.

        Returns:
            Final Resolution (VERIFIED, ABANDONED or TIMED_OUT)
        """
        polling_started_at = self.clock.now()
        last_activity = polling_started_at
        log.info("Polling audit feed of %s for request %s", self.provider_id, self.request_id)

        while True:
            if self.cancelled:
                log.info("Request %s abandoned", self.request_id)
                return Resolution(state=ResolverState.ABANDONED, failed_attempt=self.last_failed_attempt)

            resolution = await self.poll_once(polling_started_at)
            if resolution is not None:
                if resolution.state == ResolverState.VERIFIED:
                    return resolution
                if self._note_failed_attempt(resolution.failed_attempt):
                    last_activity = self.clock.now()

            if self._timed_out(last_activity):
                log.warning("Request %s timed out waiting for a proof", self.request_id)
                return Resolution(state=ResolverState.TIMED_OUT, failed_attempt=self.last_failed_attempt)

            await self._sleep(self.poll_interval)

    async def poll_once(self, polling_started_at: datetime) -> Optional[Resolution]:
        """
        Fetch the feed once and apply the resolution rules.

        Returns:
            Resolution, or None when the feed could not be fetched
        """
        self.polls += 1
        result = await self.client.list_audit(self.provider_id, limit=self.audit_limit)
        if isinstance(result, Failure):
            log.warning("Audit feed unavailable for %s: %s", self.provider_id, result.failure())
            return None

        resolution = resolve(
            request_id=self.request_id,
            polling_started_at=polling_started_at,
            records=result.unwrap(),
            now=self.clock.now(),
            window=self.window,
        )
        if resolution.ambiguity is not None:
            log.warning("Request %s: %s", self.request_id, resolution.ambiguity.message)
        if resolution.state == ResolverState.VERIFIED:
            log.info(
                "Request %s verified by %s (record %s)",
                self.request_id,
                resolution.matched_by.value if resolution.matched_by else "-",
                resolution.matched_record.verification_id if resolution.matched_record else "-",
            )
        return resolution

    def _note_failed_attempt(self, record: Optional[AuditRecord]) -> bool:
        if record is None:
            return False
        if self.last_failed_attempt is not None and self.last_failed_attempt.verification_id == record.verification_id:
            return False
        self.last_failed_attempt = record
        log.info("Request %s: proof attempt %s failed", self.request_id, record.verification_id)
        return True

    def _timed_out(self, last_activity: datetime) -> bool:
        if self.inactivity_timeout is None:
            return False
        return self.clock.now() - last_activity >= self.inactivity_timeout

    async def _interruptible_sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._cancelled.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
