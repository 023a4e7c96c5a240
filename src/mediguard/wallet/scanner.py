"""Scan dispatcher and scan loop

The dispatcher turns one decoded code into an Action without side effects.
The scan loop owns everything around it: importing offered credentials,
handing verification requests to the proof flow, telling the operator what
happened and suspending decoding for a cool-down so a code that is still in
front of the camera is not handled twice.
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Deque, Optional, Union

from returns.result import Failure

from mediguard.domain import (
    DEFAULT_CODE_SCHEME,
    Clock,
    Credential,
    ImportCredential,
    InvalidCredential,
    MediguardConfig,
    RequestId,
    SubmitProof,
    decode,
)
from mediguard.wallet.store import WalletCredentialStore

log = logging.getLogger(__name__)

DEFAULT_COOLDOWN = timedelta(seconds=1.5)
NOTICE_HISTORY = 50


# ======================
# Actions (Sealed Interface)
# ======================


@dataclass(frozen=True)
class NavigateToProofFlow:
    """Open the proof flow for a verification session"""

    request_id: RequestId


@dataclass(frozen=True)
class OfferCredentialImport:
    """Import the offered credential into the wallet"""

    credential: Credential


@dataclass(frozen=True)
class Reject:
    """The code could not be used"""

    reason: str


Action = Union[NavigateToProofFlow, OfferCredentialImport, Reject]


class ScanDispatcher:
    """
    Classifies raw scanned text into an Action.

    Args:
        scheme: URI scheme token codes must use
    """

    def __init__(self, scheme: str = DEFAULT_CODE_SCHEME):
        self.scheme = scheme

    def dispatch(self, raw: str) -> Action:
        result = decode(raw, scheme=self.scheme)
        if isinstance(result, Failure):
            return Reject(reason=result.failure().message)

        intent = result.unwrap()
        if isinstance(intent, SubmitProof):
            return NavigateToProofFlow(request_id=intent.request_id)
        if isinstance(intent, ImportCredential):
            return OfferCredentialImport(credential=intent.credential)

        return Reject(reason=f"Unsupported scan intent: {type(intent).__name__}")


# ======================
# Scan loop
# ======================


class ScanState(str, Enum):
    SCANNING = "SCANNING"
    COOLING = "COOLING"
    STOPPED = "STOPPED"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class ScanNotice:
    """Message shown to the operator after a scan"""

    level: NoticeLevel
    message: str


class ScanLoop:
    """
    State machine driving one camera decode loop.

    SCANNING accepts the next decoded code. Handling it moves the loop to
    COOLING; tick() returns to SCANNING once the cool-down has elapsed.
    stop() parks the loop in STOPPED until resume(). The latest
    NOTICE_HISTORY notices are kept in `notices`.

    Args:
        store: Wallet store receiving offered credentials
        on_proof_request: Proof flow entry point, called with the request_id
        clock: Clock measuring the cool-down
        dispatcher: Code classifier
        cooldown: Pause after each handled code
        on_notice: Receives every operator notice
    """

    def __init__(
        self,
        store: WalletCredentialStore,
        on_proof_request: Callable[[RequestId], None],
        clock: Clock,
        dispatcher: Optional[ScanDispatcher] = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        on_notice: Optional[Callable[[ScanNotice], None]] = None,
    ):
        self.store = store
        self.on_proof_request = on_proof_request
        self.clock = clock
        self.dispatcher = dispatcher or ScanDispatcher()
        self.cooldown = cooldown
        self.on_notice = on_notice
        self.notices: Deque[ScanNotice] = deque(maxlen=NOTICE_HISTORY)
        self._state = ScanState.SCANNING
        self._cooling_until: Optional[datetime] = None

    @classmethod
    def from_config(
        cls,
        config: MediguardConfig,
        store: WalletCredentialStore,
        on_proof_request: Callable[[RequestId], None],
        clock: Clock,
        on_notice: Optional[Callable[[ScanNotice], None]] = None,
    ) -> "ScanLoop":
        """Scan loop using the configured code scheme and cool-down"""
        return cls(
            store=store,
            on_proof_request=on_proof_request,
            clock=clock,
            dispatcher=ScanDispatcher(scheme=config.code_scheme),
            cooldown=config.scan_cooldown,
            on_notice=on_notice,
        )

    @property
    def state(self) -> ScanState:
        return self._state

    def on_decoded(self, raw: str) -> Optional[Action]:
        """
        Handle one decoded code.

        Returns:
            The dispatched Action, or None when the loop is not SCANNING
        """
        if self._state != ScanState.SCANNING:
            log.debug("Ignoring decode while %s", self._state.value)
            return None

        try:
            action = self.dispatcher.dispatch(raw)

            if isinstance(action, OfferCredentialImport):
                self._import(action.credential)
            elif isinstance(action, NavigateToProofFlow):
                self._open_proof_flow(action.request_id)
            else:
                log.info("Rejected scanned code: %s", action.reason)
                self._notify(NoticeLevel.ERROR, f"Invalid Code: {action.reason}")
        finally:
            self._state = ScanState.COOLING
            self._cooling_until = self.clock.now() + self.cooldown
        return action

    def tick(self) -> ScanState:
        """Re-arm scanning once the cool-down has elapsed"""
        if self._state == ScanState.COOLING and self._cooling_until is not None:
            if self.clock.now() >= self._cooling_until:
                self._state = ScanState.SCANNING
                self._cooling_until = None
        return self._state

    def stop(self) -> None:
        self._state = ScanState.STOPPED
        self._cooling_until = None

    def resume(self) -> None:
        if self._state == ScanState.STOPPED:
            self._state = ScanState.SCANNING

    def _import(self, credential: Credential) -> None:
        result = self.store.import_credential(credential)
        if isinstance(result, Failure):
            error = result.failure()
            if isinstance(error, InvalidCredential):
                self._notify(NoticeLevel.ERROR, f"Invalid credential: {error.message}")
            else:
                self._notify(NoticeLevel.ERROR, f"Could not save credential: {error.message}")
            return

        outcome = result.unwrap()
        if outcome.added:
            self._notify(NoticeLevel.SUCCESS, f"Added {outcome.credential.type} credential")
        else:
            self._notify(NoticeLevel.INFO, "Credential already exists")

    def _open_proof_flow(self, request_id: RequestId) -> None:
        try:
            self.on_proof_request(request_id)
        except Exception:
            log.exception("Proof flow failed for request %s", request_id)
            self._notify(NoticeLevel.ERROR, "Could not open verification request")

    def _notify(self, level: NoticeLevel, message: str) -> None:
        notice = ScanNotice(level=level, message=message)
        self.notices.append(notice)
        if self.on_notice is None:
            return
        try:
            self.on_notice(notice)
        except Exception:
            log.exception("Notice handler failed for %r", notice.message)
