"""Per-mode recency lists of chosen themes, persisted as one JSON record.

// [LAW:single-enforcer] record_choice() and clear() are the only mutators; each one saves.
// [LAW:one-source-of-truth] decode_recency() is the sole format-migration boundary.

Two on-disk generations exist:

    legacy:   {"dark": "gruvbox-dark"}
    current:  {"dark": ["gruvbox-dark", "nord"]}

Loading always migrates to the current shape; saving always writes it.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from appearance_theme.core.errors import CorruptState, PersistenceFailure, UnknownMode
from appearance_theme.core.modes import ALL_MODES, Mode
from appearance_theme.io.blob_store import BlobStore

logger = logging.getLogger(__name__)

MAX_RECENT = 5

PreferenceRecord = dict[Mode, list[str]]


def decode_recency(value: object) -> list[str]:
    """Decode one persisted mode entry into a RecencyList.

    Tries "list of identifiers" first, then "single identifier", then null.
    Raises CorruptState for any other shape.
    """
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise CorruptState(f"recency list holds non-string items: {value!r}")
        deduped: list[str] = []
        for item in value:
            if item and item not in deduped:
                deduped.append(item)
        return deduped[:MAX_RECENT]
    if isinstance(value, str):
        return [value] if value else []
    if value is None:
        return []
    raise CorruptState(f"unsupported recency entry: {value!r}")


def migrate(raw: dict) -> PreferenceRecord:
    """Convert a raw persisted mapping (either generation) into a PreferenceRecord.

    Entries that fail to decode are dropped with a warning; the other mode
    is kept. Idempotent: migrate(encode(migrate(x))) == migrate(x).
    """
    record: PreferenceRecord = {}
    for key, value in raw.items():
        try:
            mode = Mode.parse(key)
        except UnknownMode:
            logger.warning("Dropping preferences for unknown mode %r", key)
            continue
        try:
            recency = decode_recency(value)
        except CorruptState as e:
            logger.warning("Dropping corrupt %s preferences: %s", mode.value, e)
            continue
        if recency:
            record[mode] = recency
    return record


def encode(record: PreferenceRecord) -> bytes:
    """Serialize a record in the current generation. Empty modes are omitted."""
    payload = {
        mode.value: list(record[mode])
        for mode in ALL_MODES
        if record.get(mode)
    }
    return (json.dumps(payload, indent=2) + "\n").encode("utf-8")


class PreferenceStore:
    """Owns the PreferenceRecord and its persistence.

    The record is loaded once at construction. After that the in-memory copy
    is authoritative: a failed save is logged and the session carries on.
    """

    def __init__(self, blob_store: BlobStore) -> None:
        self._blob_store = blob_store
        self._record: PreferenceRecord = self.load()

    def load(self) -> PreferenceRecord:
        """Read and migrate the persisted record. Never raises.

        Missing data gives an empty record. Unparsable data is reported as
        CorruptState in the log and also gives an empty record.
        """
        try:
            raw_bytes = self._blob_store.read()
        except OSError as e:
            logger.warning("Could not read preferences from %r: %s", self._blob_store, e)
            return {}
        if raw_bytes is None:
            return {}
        try:
            raw = _parse(raw_bytes)
        except CorruptState as e:
            logger.warning("Corrupt preferences in %r, starting empty: %s", self._blob_store, e)
            return {}
        return migrate(raw)

    def save(self) -> bool:
        """Persist the current record. Returns False (and logs) on failure."""
        try:
            self._write()
        except PersistenceFailure as e:
            logger.warning("%s; keeping preferences in memory only", e)
            return False
        return True

    def _write(self) -> None:
        try:
            self._blob_store.write(encode(self._record))
        except OSError as e:
            raise PersistenceFailure(
                f"Failed to write preferences to {self._blob_store!r}: {e}"
            ) from e

    def record_choice(self, mode: Mode, item: str) -> None:
        """Move item to the front of mode's recency list, cap it, and save."""
        recency = [existing for existing in self._record.get(mode, []) if existing != item]
        recency.insert(0, item)
        self._record[mode] = recency[:MAX_RECENT]
        self.save()

    def clear(self) -> None:
        """Forget every recorded choice and save the empty record."""
        self._record = {}
        self.save()

    def most_recent(self, mode: Mode) -> Optional[str]:
        recency = self._record.get(mode)
        return recency[0] if recency else None

    def recency_list(self, mode: Mode) -> list[str]:
        return list(self._record.get(mode, []))

    def snapshot(self) -> PreferenceRecord:
        return {mode: list(items) for mode, items in self._record.items()}


def _parse(raw_bytes: bytes) -> dict:
    try:
        data = json.loads(raw_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptState(str(e)) from e
    if not isinstance(data, dict):
        raise CorruptState(f"expected an object at top level, got {type(data).__name__}")
    return data
