"""Tests for the wallet credential store and its persistence"""

import json
import threading
from datetime import datetime, timezone

import pytest
from returns.result import Failure, Success

from mediguard.config import create_test_config
from mediguard.domain import Credential, FixedClock, InvalidCredential
from mediguard.wallet import (
    STORAGE_KEY,
    CredentialPersistence,
    InMemoryCredentialPersistence,
    JsonFileCredentialPersistence,
    PersistenceError,
    StorageFailure,
    WalletCredentialStore,
)


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(fixed_clock) -> WalletCredentialStore:
    return WalletCredentialStore(InMemoryCredentialPersistence(), fixed_clock)


def _payload(credential_id="cred-1", **extra):
    payload = {"id": credential_id, "type": "vaccination", "iss": "city_hospital", "sig": "sig-1"}
    payload.update(extra)
    return payload


class FailingPersistence(CredentialPersistence):
    def load(self):
        return []

    def save(self, payloads):
        raise PersistenceError("disk full")


class TestImportCredential:
    """Tests for WalletCredentialStore.import_credential"""

    def test_new_credential_is_added_and_stamped(self, store, fixed_clock):
        result = store.import_credential(_payload(vaccination_type="COVID-19"))

        assert isinstance(result, Success)
        outcome = result.unwrap()
        assert outcome.added is True
        assert outcome.credential.issued_at == fixed_clock.now()
        assert store.get("cred-1").attributes == {"vaccination_type": "COVID-19"}

    def test_duplicate_id_is_a_no_op(self, store, fixed_clock):
        store.import_credential(_payload())
        fixed_clock.advance(60)

        outcome = store.import_credential(_payload(sig="different")).unwrap()

        assert outcome.added is False
        assert len(store) == 1
        assert store.get("cred-1").sig == "sig-1"
        assert store.get("cred-1").issued_at == datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

    def test_accepts_credential_objects(self, store):
        credential = Credential(id="c9", type="identity", iss="h1", sig="s")

        assert store.import_credential(credential).unwrap().added is True

    def test_blank_fields_on_credential_objects_rejected(self, store):
        credential = Credential(id="c9", type="identity", iss=" ", sig="s")

        result = store.import_credential(credential)

        assert isinstance(result.failure(), InvalidCredential)
        assert result.failure().missing_fields == ("iss",)
        assert store.list_credentials() == []

    def test_missing_fields_rejected_without_mutation(self, store):
        result = store.import_credential({"id": "bad", "type": "vaccination"})

        assert isinstance(result, Failure)
        assert isinstance(result.failure(), InvalidCredential)
        assert store.list_credentials() == []

    def test_failed_save_leaves_state_unchanged(self, fixed_clock):
        store = WalletCredentialStore(FailingPersistence(), fixed_clock)

        result = store.import_credential(_payload())

        assert isinstance(result.failure(), StorageFailure)
        assert store.list_credentials() == []

    def test_concurrent_imports_of_same_code_store_once(self, store):
        """Two rapid scans of the same still-visible code"""
        barrier = threading.Barrier(8)
        outcomes = []

        def scan():
            barrier.wait()
            outcomes.append(store.import_credential(_payload()).unwrap().added)

        threads = [threading.Thread(target=scan) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 1
        assert outcomes.count(True) == 1


class TestImportMany:
    """Tests for batch import"""

    def test_one_failure_does_not_abort_the_rest(self, store):
        results = store.import_many([_payload("a"), {"type": "broken"}, _payload("b"), _payload("a")])

        assert [isinstance(r, Success) for r in results] == [True, False, True, True]
        assert [r.unwrap().added for r in results if isinstance(r, Success)] == [True, True, False]
        assert [c.id for c in store.list_credentials()] == ["a", "b"]


class TestPersistence:
    """Tests for persistence implementations"""

    def test_store_reloads_from_persistence(self, fixed_clock):
        persistence = InMemoryCredentialPersistence()
        WalletCredentialStore(persistence, fixed_clock).import_credential(_payload(age="34"))

        reloaded = WalletCredentialStore(persistence, fixed_clock)

        credential = reloaded.get("cred-1")
        assert credential.attributes == {"age": "34"}
        assert credential.issued_at == fixed_clock.now()

    def test_json_file_layout(self, tmp_path, fixed_clock):
        path = tmp_path / "wallet.json"
        store = WalletCredentialStore(JsonFileCredentialPersistence(path), fixed_clock)

        store.import_credential(_payload(vaccination_type="COVID-19"))

        document = json.loads(path.read_text(encoding="utf-8"))
        assert list(document) == [STORAGE_KEY]
        assert document[STORAGE_KEY] == [
            {
                "id": "cred-1",
                "type": "vaccination",
                "iss": "city_hospital",
                "sig": "sig-1",
                "vaccination_type": "COVID-19",
                "issuedAt": "2024-01-15T12:00:00+00:00",
            }
        ]

    def test_json_file_round_trip(self, tmp_path, fixed_clock):
        path = tmp_path / "nested" / "wallet.json"
        WalletCredentialStore(JsonFileCredentialPersistence(path), fixed_clock).import_many([_payload("a"), _payload("b")])

        reloaded = WalletCredentialStore(JsonFileCredentialPersistence(path), fixed_clock)

        assert [c.id for c in reloaded.list_credentials()] == ["a", "b"]

    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileCredentialPersistence(tmp_path / "absent.json").load() == []

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "wallet.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceError):
            JsonFileCredentialPersistence(path).load()

    def test_invalid_stored_entries_are_skipped(self, fixed_clock):
        persistence = InMemoryCredentialPersistence([_payload("good"), {"id": "bad"}])

        store = WalletCredentialStore(persistence, fixed_clock)

        assert [c.id for c in store.list_credentials()] == ["good"]


class TestFromConfig:
    """Tests for WalletCredentialStore.from_config"""

    def test_configured_path_uses_json_file(self, tmp_path, fixed_clock):
        path = tmp_path / "wallet.json"
        config = create_test_config(wallet_store_path=str(path))

        store = WalletCredentialStore.from_config(config, fixed_clock)
        store.import_credential(_payload())

        assert isinstance(store.persistence, JsonFileCredentialPersistence)
        assert [c.id for c in WalletCredentialStore.from_config(config, fixed_clock).list_credentials()] == ["cred-1"]

    def test_no_path_keeps_wallet_in_memory(self, fixed_clock):
        store = WalletCredentialStore.from_config(create_test_config(), fixed_clock)

        assert isinstance(store.persistence, InMemoryCredentialPersistence)
