"""Merge registration records read from several storage locations."""
import json
import logging
from typing import Any, Callable, Iterable, List, Sequence, Tuple, Union

from src.models.registration import RegistrationRecord
from src.utils.date_utils import parse_timestamp
from src.utils.exceptions import SourceParseError

logger = logging.getLogger(__name__)

RawSource = Union[str, bytes, Sequence[Any], Callable[[], Any], None]


def parse_source(raw: RawSource, name: str = "source") -> List[RegistrationRecord]:
    """
    Interpret one storage source as a list of records.

    Args:
        raw: JSON text, a list of record dicts/records, a loader callable
             returning either, or None (empty source)
        name: Label used in error messages

    Returns:
        List of RegistrationRecord in source order

    Raises:
        SourceParseError: If any part of the source cannot be interpreted
    """
    if callable(raw):
        try:
            raw = raw()
        except (OSError, ValueError) as e:
            raise SourceParseError(f"Could not read {name}: {e}") from e

    if raw is None:
        return []

    if isinstance(raw, (str, bytes)):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SourceParseError(f"Malformed JSON in {name}: {e.msg}") from e

    if not isinstance(raw, (list, tuple)):
        raise SourceParseError(f"{name} must contain a list of registrations")

    records = []
    for item in raw:
        if isinstance(item, RegistrationRecord):
            records.append(item)
        else:
            records.append(RegistrationRecord.from_dict(item))
    return records


def reconcile(*collections: Iterable[Union[RegistrationRecord, dict]]) -> List[RegistrationRecord]:
    """
    Combine record collections into one canonical list.

    Serialized dicts are parsed with ``RegistrationRecord.from_dict`` and
    raise ``SourceParseError`` if invalid.

    Steps:
        1. Concatenate all collections
        2. Keep the first record seen for each ID
        3. Sort newest first; equal timestamps are ordered by ID

    Returns:
        New list with unique IDs. Running it again on its own output
        returns the same list.
    """
    seen = set()
    unique: List[RegistrationRecord] = []
    for collection in collections:
        for record in collection or ():
            if isinstance(record, dict):
                record = RegistrationRecord.from_dict(record)
            if record.id in seen:
                continue
            seen.add(record.id)
            unique.append(record)

    # two stable passes: id ascending, then timestamp descending
    unique.sort(key=lambda r: r.id)
    unique.sort(key=lambda r: parse_timestamp(r.timestamp), reverse=True)
    return unique


def reconcile_sources(sources: Iterable[Tuple[str, RawSource]]) -> List[RegistrationRecord]:
    """
    Parse every named source and reconcile the ones that parse.

    A corrupt source is logged and skipped whole; it never aborts the
    others.

    Args:
        sources: (name, raw) pairs, see ``parse_source`` for raw forms

    Returns:
        Reconciled record list
    """
    collections = []
    for name, raw in sources:
        try:
            collections.append(parse_source(raw, name))
        except SourceParseError as e:
            logger.warning("Skipping registration source %s: %s", name, e)
    return reconcile(*collections)


def find_conflicts(*collections: Iterable[RegistrationRecord]) -> List[Tuple[str, List[str]]]:
    """
    Report IDs whose copies disagree on payment status.

    Returns:
        (id, statuses in encounter order) for each conflicting ID
    """
    statuses = {}
    order = []
    for collection in collections:
        for record in collection or ():
            if record.id not in statuses:
                statuses[record.id] = []
                order.append(record.id)
            if record.payment_status not in statuses[record.id]:
                statuses[record.id].append(record.payment_status)
    return [(rid, statuses[rid]) for rid in order if len(statuses[rid]) > 1]
