"""Holder wallet - credential store, persistence and scan handling"""

from mediguard.wallet.persistence import (
    STORAGE_KEY,
    CredentialPersistence,
    InMemoryCredentialPersistence,
    JsonFileCredentialPersistence,
    PersistenceError,
)
from mediguard.wallet.store import ImportOutcome, StorageFailure, StoreError, WalletCredentialStore
from mediguard.wallet.scanner import (
    NOTICE_HISTORY,
    Action,
    NavigateToProofFlow,
    NoticeLevel,
    OfferCredentialImport,
    Reject,
    ScanDispatcher,
    ScanLoop,
    ScanNotice,
    ScanState,
)

__all__ = [
    # Persistence
    "STORAGE_KEY",
    "CredentialPersistence",
    "InMemoryCredentialPersistence",
    "JsonFileCredentialPersistence",
    "PersistenceError",
    # Store
    "ImportOutcome",
    "StorageFailure",
    "StoreError",
    "WalletCredentialStore",
    # Scanner
    "NOTICE_HISTORY",
    "Action",
    "NavigateToProofFlow",
    "OfferCredentialImport",
    "Reject",
    "ScanDispatcher",
    "ScanLoop",
    "ScanNotice",
    "ScanState",
    "NoticeLevel",
]
