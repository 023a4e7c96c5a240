"""Wallet credential store

Holds the credentials a holder has imported, deduplicated by id. Every
mutation is a read-modify-write of the whole list against the persistence
boundary, serialised by a lock so rapid repeated scans of one code store it
once.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

from returns.result import Failure, Result, Success

from mediguard.domain import (
    Clock,
    Credential,
    InvalidCredential,
    MediguardConfig,
    credential_from_payload,
    credential_to_payload,
)
from mediguard.wallet.persistence import (
    CredentialPersistence,
    InMemoryCredentialPersistence,
    JsonFileCredentialPersistence,
    PersistenceError,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportOutcome:
    """
    Attributes:
        added: False when a credential with the same id was already stored
        credential: The stored credential (the existing one for duplicates)
    """

    added: bool
    credential: Credential


@dataclass(frozen=True)
class StorageFailure:
    """The credential list could not be saved; nothing was changed"""

    message: str = ""


StoreError = Union[InvalidCredential, StorageFailure]


class WalletCredentialStore:
    """
    Credential store of one wallet.

    Args:
        persistence: Where the credential list lives
        clock: Stamps issuedAt on import
    """

    def __init__(self, persistence: CredentialPersistence, clock: Clock):
        self.persistence = persistence
        self.clock = clock
        self._lock = threading.Lock()
        self._credentials: List[Credential] = self._load()

    @classmethod
    def from_config(cls, config: MediguardConfig, clock: Clock) -> "WalletCredentialStore":
        """Store backed by config.wallet_store_path, or kept in memory when it is unset"""
        if config.wallet_store_path:
            persistence: CredentialPersistence = JsonFileCredentialPersistence(config.wallet_store_path)
        else:
            persistence = InMemoryCredentialPersistence()
        return cls(persistence, clock)

    def _load(self) -> List[Credential]:
        credentials: List[Credential] = []
        seen = set()
        for payload in self.persistence.load():
            result = credential_from_payload(payload)
            if isinstance(result, Failure):
                log.warning("Skipping stored credential: %s", result.failure().message)
                continue
            credential = result.unwrap()
            if credential.id in seen:
                continue
            seen.add(credential.id)
            credentials.append(credential)
        return credentials

    def import_credential(
        self, item: Union[Credential, Mapping[str, Any]]
    ) -> Result[ImportOutcome, StoreError]:
        """
        Import one credential.

        A credential whose id is already stored is left untouched and reported
        with added=False. A new credential is stamped with issuedAt and saved.

        Returns:
            Success(ImportOutcome), Failure(InvalidCredential) for payloads
            missing type/iss/sig, or Failure(StorageFailure) if saving failed
        """
        payload = credential_to_payload(item, include_issued_at=True) if isinstance(item, Credential) else item
        parsed = credential_from_payload(payload)
        if isinstance(parsed, Failure):
            return parsed
        credential = parsed.unwrap()

        with self._lock:
            existing = self._find(credential.id)
            if existing is not None:
                log.info("Credential %s already stored", credential.id)
                return Success(ImportOutcome(added=False, credential=existing))

            stamped = credential.with_issued_at(self.clock.now())
            updated = self._credentials + [stamped]
            try:
                self.persistence.save([credential_to_payload(c, include_issued_at=True) for c in updated])
            except PersistenceError as e:
                log.error("Failed to store credential %s: %s", credential.id, e)
                return Failure(StorageFailure(message=str(e)))

            self._credentials = updated

        log.info("Stored %s credential %s from %s", stamped.type, stamped.id, stamped.iss)
        return Success(ImportOutcome(added=True, credential=stamped))

    def import_many(
        self, items: Iterable[Union[Credential, Mapping[str, Any]]]
    ) -> List[Result[ImportOutcome, StoreError]]:
        """Import each item independently; one failure never stops the rest"""
        return [self.import_credential(item) for item in items]

    def list_credentials(self) -> List[Credential]:
        """Stored credentials in import order"""
        with self._lock:
            return list(self._credentials)

    def get(self, credential_id: str) -> Optional[Credential]:
        with self._lock:
            return self._find(credential_id)

    def _find(self, credential_id: str) -> Optional[Credential]:
        return next((c for c in self._credentials if c.id == credential_id), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)
