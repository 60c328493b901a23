from __future__ import annotations

"""Usage tracker: the persisted set of question ids already served.

Every mutation persists the full set before returning. Reads that fail are
treated as "nothing served yet"; writes that fail are logged and the
in-memory set stays authoritative until the next successful write.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import FrozenSet, Iterable, Optional, Set

from pydantic import ValidationError

from ..storage.store import KeyValueStore
from .errors import PersistenceFailure
from .schema import STORAGE_KEY, UsageRecord

logger = logging.getLogger(__name__)


class UsageTracker:
    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self.store = store
        self.key = key
        self._used: Set[str] = set()
        self.last_updated: Optional[datetime] = None
        # Single writer around read-modify-persist
        self._lock = threading.RLock()

    @property
    def used_ids(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._used)

    def contains(self, question_id: str) -> bool:
        with self._lock:
            return question_id in self._used

    def __len__(self) -> int:
        with self._lock:
            return len(self._used)

    def _read_record(self) -> Optional[UsageRecord]:
        try:
            raw = self.store.get_item(self.key)
        except PersistenceFailure:
            raise
        except Exception as e:
            raise PersistenceFailure(f"Error loading saved quiz data: {e}", key=self.key) from e
        if raw is None:
            return None
        try:
            return UsageRecord.model_validate_json(raw)
        except ValidationError as e:
            raise PersistenceFailure(f"Saved quiz data is malformed: {e}", key=self.key) from e

    def load(self) -> Set[str]:
        """Replace the in-memory set with the persisted one; empty on any fault."""
        with self._lock:
            try:
                record = self._read_record()
            except PersistenceFailure as e:
                logger.error("%s", e)
                record = None
            if record is None:
                self._used = set()
                self.last_updated = None
            else:
                self._used = set(record.used_question_ids)
                self.last_updated = record.last_updated
            return set(self._used)

    def save(self) -> bool:
        """Persist the current set. Returns False when the write failed."""
        with self._lock:
            now = datetime.now(timezone.utc)
            record = UsageRecord(used_question_ids=sorted(self._used), last_updated=now)
            try:
                self.store.set_item(self.key, record.to_json())
            except Exception as e:
                # In-memory state remains authoritative
                logger.error("Error saving quiz data: %s", e)
                return False
            self.last_updated = now
            return True

    def mark_used(self, question_id: str) -> None:
        with self._lock:
            self._used.add(question_id)
            self.save()

    def reset_category(self, prefix: str) -> int:
        """Drop every id whose first character equals ``prefix``. Returns the count removed."""
        with self._lock:
            doomed = {qid for qid in self._used if qid[:1] == prefix}
            self._used -= doomed
            self.save()
            return len(doomed)

    def reset_ids(self, ids: Iterable[str]) -> int:
        with self._lock:
            doomed = self._used.intersection(ids)
            self._used -= doomed
            self.save()
            return len(doomed)

    def reset_all(self) -> None:
        with self._lock:
            self._used.clear()
            self.save()
