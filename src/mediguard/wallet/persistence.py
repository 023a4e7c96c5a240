"""Wallet persistence - durable key-value storage of the credential list"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Final, List, Union

log = logging.getLogger(__name__)

STORAGE_KEY: Final[str] = "mediguard_credentials"


class PersistenceError(Exception):
    """Credential list could not be read or written"""

    pass


class CredentialPersistence(ABC):
    """
    Storage of the wallet's credential list.

    The list is stored as plain credential payloads (flat JSON objects,
    issuedAt included) so the stored layout does not depend on model classes.
    """

    @abstractmethod
    def load(self) -> List[Dict[str, Any]]:
        """
        Read the stored credential list.

        Returns:
            Stored payloads in insertion order (empty list when nothing stored)

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    def save(self, payloads: List[Dict[str, Any]]) -> None:
        """
        Replace the stored credential list.

        Raises:
            PersistenceError: If the list cannot be written
        """
        pass


class InMemoryCredentialPersistence(CredentialPersistence):
    """Volatile storage, for tests and ephemeral wallets"""

    def __init__(self, initial: List[Dict[str, Any]] | None = None):
        self._payloads: List[Dict[str, Any]] = [dict(p) for p in (initial or [])]

    def load(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self._payloads]

    def save(self, payloads: List[Dict[str, Any]]) -> None:
        self._payloads = [dict(p) for p in payloads]


class JsonFileCredentialPersistence(CredentialPersistence):
    """
    One JSON document on disk: {"mediguard_credentials": [ ... ]}.

    Writes go to a temporary file in the same directory which then replaces
    the document, so a failed write never leaves a truncated store behind.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read wallet store {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise PersistenceError(f"Wallet store {self.path} is not a JSON object")

        payloads = document.get(STORAGE_KEY, [])
        if not isinstance(payloads, list):
            raise PersistenceError(f"'{STORAGE_KEY}' in {self.path} is not a list")

        kept = [p for p in payloads if isinstance(p, dict)]
        if len(kept) != len(payloads):
            log.warning("Ignored %d malformed entries in %s", len(payloads) - len(kept), self.path)
        return kept

    def save(self, payloads: List[Dict[str, Any]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump({STORAGE_KEY: payloads}, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write wallet store {self.path}: {e}") from e
