"""JSON-file repository for registration records.

Registrations are written to several files: the main file the admin panel
edits, a shared file capped to the newest records, and a dated backup
snapshot per day. Reads merge all of them through the reconciler.
"""
import glob
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from src.models.registration import RegistrationRecord, records_to_dicts
from src.services.reconcile_service import RawSource, reconcile, reconcile_sources
from src.services.storage_service import load_json, lock_file, save_json
from src.utils.date_utils import date_stamp
from src.utils.exceptions import FileWriteError, RegistrationNotFoundError

logger = logging.getLogger(__name__)

# Data file locations
DATA_DIR = os.getenv("REGISTRATION_DATA_DIR", "data")
REGISTRATIONS_FILENAME = "registrations.json"
SHARED_REGISTRATIONS_FILENAME = "shared_registrations.json"
BACKUP_DIRNAME = "backups"
BACKUP_PREFIX = "registrations_backup_"

MAX_SHARED_RECORDS = 1000

# Fields the admin may change after creation
MUTABLE_FIELDS = {"paymentStatus"}


class RegistrationStore:
    """Repository exposing list / append / update / remove over JSON files."""

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir or DATA_DIR
        self.main_path = os.path.join(self.data_dir, REGISTRATIONS_FILENAME)
        self.shared_path = os.path.join(self.data_dir, SHARED_REGISTRATIONS_FILENAME)
        self.backup_dir = os.path.join(self.data_dir, BACKUP_DIRNAME)

    # ------------------------------------------------------------------
    # Internal helpers
    def _backup_path(self, stamp: Optional[str] = None) -> str:
        return os.path.join(self.backup_dir, f"{BACKUP_PREFIX}{stamp or date_stamp()}.json")

    def _backup_paths(self) -> List[str]:
        pattern = os.path.join(self.backup_dir, f"{BACKUP_PREFIX}*.json")
        # newest day first
        return sorted(glob.glob(pattern), reverse=True)

    def _all_paths(self) -> List[str]:
        return [self.main_path, self.shared_path] + self._backup_paths()

    @staticmethod
    def _loader(path: str):
        return lambda: load_json(path, default=[])

    @staticmethod
    def _read_list(path: str) -> List[Dict[str, Any]]:
        """
        Read a registration file for rewriting.

        Raises:
            FileWriteError: If the file can't be read or isn't a JSON list
        """
        try:
            data = load_json(path, default=[])
        except (OSError, ValueError) as e:
            raise FileWriteError(f"Cannot update unreadable file {path}: {e}") from e
        if not isinstance(data, list):
            raise FileWriteError(f"Cannot update {path}: expected a list of registrations")
        return data

    def sources(self) -> List[Tuple[str, RawSource]]:
        """Named sources in priority order: main, shared, then backups."""
        return [(path, self._loader(path)) for path in self._all_paths()]

    # ------------------------------------------------------------------
    # Repository operations
    def list(self) -> List[RegistrationRecord]:
        """All registrations, deduplicated and newest first."""
        return reconcile_sources(self.sources())

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        for record in self.list():
            if record.id == registration_id:
                return record
        return None

    def append(self, record: RegistrationRecord) -> None:
        """
        Persist a new registration to the main, shared and backup files.

        An unreadable shared file is set aside (copied to ``.backup``) and
        started fresh; the main file is never overwritten that way.

        Raises:
            FileWriteError: If the main file is unreadable or a write fails
        """
        payload = record.to_dict()

        with lock_file(self.main_path):
            main = self._read_list(self.main_path)
            main.insert(0, payload)
            save_json(self.main_path, main, backup=True)

        with lock_file(self.shared_path):
            keep_copy = False
            try:
                shared = self._read_list(self.shared_path)
            except FileWriteError as e:
                logger.warning("Starting a fresh shared registration file: %s", e)
                shared, keep_copy = [], True
            shared.insert(0, payload)
            del shared[MAX_SHARED_RECORDS:]
            save_json(self.shared_path, shared, backup=keep_copy)
            save_json(self._backup_path(), shared, backup=False)

        logger.info("Stored registration %s (total %s)", record.id, record.total_amount)

    def update(self, registration_id: str, patch: Dict[str, Any]) -> RegistrationRecord:
        """
        Apply an admin change to one registration.

        Args:
            registration_id: Registration to change
            patch: Serialized keys to change; only ``paymentStatus`` is allowed

        Returns:
            The updated record

        Raises:
            ValueError: If patch touches immutable fields or has a bad status
            RegistrationNotFoundError: If no registration has this ID
        """
        illegal = set(patch) - MUTABLE_FIELDS
        if illegal:
            raise ValueError(f"Fields cannot be changed after creation: {sorted(illegal)}")

        with lock_file(self.main_path):
            records = self.list()
            updated = None
            for index, record in enumerate(records):
                if record.id == registration_id:
                    updated = record.with_payment_status(patch.get("paymentStatus", record.payment_status))
                    records[index] = updated
                    break

            if updated is None:
                raise RegistrationNotFoundError(f"Registration not found: {registration_id}")

            # the main file is read first, so its copy wins on the next merge
            save_json(self.main_path, records_to_dicts(records), backup=True)

        logger.info("Registration %s payment status set to %s", registration_id, updated.payment_status)
        return updated

    def remove(self, registration_id: str) -> None:
        """
        Delete a registration from every file that holds it.

        Unreadable files are logged and skipped.

        Raises:
            RegistrationNotFoundError: If no readable file holds this ID
        """
        found = False
        for path in self._all_paths():
            with lock_file(path):
                try:
                    data = self._read_list(path)
                except FileWriteError as e:
                    logger.warning("Skipping registration file %s: %s", path, e)
                    continue
                kept = [item for item in data if not (isinstance(item, dict) and item.get("id") == registration_id)]
                if len(kept) != len(data):
                    found = True
                    save_json(path, kept, backup=(path == self.main_path))

        if not found:
            raise RegistrationNotFoundError(f"Registration not found: {registration_id}")

        logger.info("Removed registration %s", registration_id)

    def replace_all(self, records: List[RegistrationRecord]) -> None:
        """
        Overwrite the main file with imported ``records``.

        Copies in the shared and backup files are kept; the imported copy of
        an ID wins on the next merge because the main file is read first.
        """
        merged = reconcile(records)
        with lock_file(self.main_path):
            save_json(self.main_path, records_to_dicts(merged), backup=True)
        logger.info("Imported %d registrations", len(merged))

    def clear(self) -> int:
        """
        Delete every registration file.

        Returns:
            Number of files removed
        """
        removed = 0
        for path in self._all_paths():
            if os.path.exists(path):
                with lock_file(path):
                    os.remove(path)
                removed += 1
        logger.warning("Cleared all registration data (%d files)", removed)
        return removed


def get_registration_store() -> RegistrationStore:
    """Store rooted at the configured data directory."""
    return RegistrationStore(DATA_DIR)
