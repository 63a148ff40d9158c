"""Unit tests for RegistrationStore."""
import json
import os

import pytest
from unittest.mock import patch

from src.models.registration import RegistrationRecord
from src.services.registration_store import RegistrationStore
from src.utils.exceptions import FileWriteError, RegistrationNotFoundError


def make_record(record_id, timestamp, **overrides):
    values = {
        "id": record_id,
        "timestamp": timestamp,
        "first_name": "Test",
        "last_name": "User",
        "email": "test@example.com",
        "phone": "555-0100",
        "registration_type": "individual-regular",
        "total_amount": 210,
    }
    values.update(overrides)
    return RegistrationRecord(**values)


@pytest.fixture
def store(tmp_path):
    """Store rooted in a temporary directory."""
    return RegistrationStore(str(tmp_path / "data"))


def read(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class TestAppend:
    """Test RegistrationStore.append."""

    def test_writes_main_shared_and_backup(self, store):
        record = make_record("r1", "2026-01-10T09:00:00Z")

        with patch('src.services.registration_store.date_stamp', return_value="2026-01-10"):
            store.append(record)

        assert read(store.main_path)[0]["id"] == "r1"
        assert read(store.shared_path)[0]["id"] == "r1"
        backup = os.path.join(store.backup_dir, "registrations_backup_2026-01-10.json")
        assert read(backup)[0]["id"] == "r1"

    def test_newest_first_in_files(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        store.append(make_record("r2", "2026-01-11T09:00:00Z"))

        assert [item["id"] for item in read(store.main_path)] == ["r2", "r1"]

    def test_shared_file_capped(self, store):
        with patch('src.services.registration_store.MAX_SHARED_RECORDS', 2):
            for i in range(3):
                store.append(make_record(f"r{i}", f"2026-01-1{i}T09:00:00Z"))

        assert [item["id"] for item in read(store.shared_path)] == ["r2", "r1"]
        assert len(read(store.main_path)) == 3

    def test_unreadable_main_file_raises_write_error(self, store):
        """A corrupt main file is reported, never overwritten."""
        os.makedirs(store.data_dir)
        with open(store.main_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        with pytest.raises(FileWriteError, match="unreadable"):
            store.append(make_record("r1", "2026-01-10T09:00:00Z"))

        with open(store.main_path, encoding="utf-8") as f:
            assert f.read() == "{not json"
        assert not os.path.exists(store.shared_path)

    def test_main_file_not_a_list(self, store):
        os.makedirs(store.data_dir)
        with open(store.main_path, "w", encoding="utf-8") as f:
            json.dump({"id": "r0"}, f)

        with pytest.raises(FileWriteError, match="expected a list"):
            store.append(make_record("r1", "2026-01-10T09:00:00Z"))

    def test_unreadable_shared_file_started_fresh(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        with open(store.shared_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        store.append(make_record("r2", "2026-01-11T09:00:00Z"))

        assert [item["id"] for item in read(store.shared_path)] == ["r2"]
        with open(f"{store.shared_path}.backup", encoding="utf-8") as f:
            assert f.read() == "{not json"
        assert [r.id for r in store.list()] == ["r2", "r1"]


class TestList:
    """Test RegistrationStore.list."""

    def test_empty_store(self, store):
        assert store.list() == []

    def test_deduplicates_across_files(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        store.append(make_record("r2", "2026-01-11T09:00:00Z"))

        result = store.list()

        assert [r.id for r in result] == ["r2", "r1"]

    def test_corrupt_file_skipped(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        with open(store.shared_path, "w", encoding="utf-8") as f:
            f.write("{corrupt")

        assert [r.id for r in store.list()] == ["r1"]

    def test_reads_legacy_backup_files(self, store):
        os.makedirs(store.backup_dir)
        legacy = make_record("old", "2025-12-01T09:00:00Z").to_dict()
        with open(os.path.join(store.backup_dir, "registrations_backup_2025-12-01.json"), "w") as f:
            json.dump([legacy], f)

        assert [r.id for r in store.list()] == ["old"]

    def test_get(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        assert store.get("r1").id == "r1"
        assert store.get("nope") is None


class TestUpdate:
    """Test RegistrationStore.update."""

    def test_updates_payment_status(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))

        updated = store.update("r1", {"paymentStatus": "paid"})

        assert updated.payment_status == "paid"
        assert store.get("r1").payment_status == "paid"

    def test_update_wins_over_stale_copies(self, store):
        """Stale shared/backup copies don't undo an admin change."""
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        store.update("r1", {"paymentStatus": "refunded"})

        assert read(store.shared_path)[0]["paymentStatus"] == "pending"
        assert store.list()[0].payment_status == "refunded"

    def test_immutable_fields_rejected(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))

        with pytest.raises(ValueError, match="cannot be changed"):
            store.update("r1", {"totalAmount": 0})

    def test_unknown_id(self, store):
        with pytest.raises(RegistrationNotFoundError):
            store.update("missing", {"paymentStatus": "paid"})


class TestRemove:
    """Test RegistrationStore.remove."""

    def test_removed_from_every_file(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        store.append(make_record("r2", "2026-01-11T09:00:00Z"))

        store.remove("r1")

        assert [r.id for r in store.list()] == ["r2"]

    def test_unknown_id(self, store):
        with pytest.raises(RegistrationNotFoundError):
            store.remove("missing")

    def test_unreadable_backup_skipped(self, store, caplog):
        """A corrupt backup doesn't stop the delete in the other files."""
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))
        store.append(make_record("r2", "2026-01-11T09:00:00Z"))
        corrupt = os.path.join(store.backup_dir, "registrations_backup_2020-01-01.json")
        with open(corrupt, "w", encoding="utf-8") as f:
            f.write("{not json")

        store.remove("r1")

        assert [r.id for r in store.list()] == ["r2"]
        assert [item["id"] for item in read(store.main_path)] == ["r2"]
        assert [item["id"] for item in read(store.shared_path)] == ["r2"]
        assert "Skipping registration file" in caplog.text


class TestReplaceAndClear:
    """Test replace_all and clear."""

    def test_replace_all(self, store):
        records = [make_record("a", "2026-01-10T09:00:00Z"), make_record("b", "2026-01-12T09:00:00Z")]

        store.replace_all(records)

        assert [item["id"] for item in read(store.main_path)] == ["b", "a"]

    def test_clear(self, store):
        store.append(make_record("r1", "2026-01-10T09:00:00Z"))

        removed = store.clear()

        assert removed == 3
        assert store.list() == []
