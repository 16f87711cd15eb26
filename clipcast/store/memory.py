"""
In-memory document store.

Used for tests and local development. Documents are deep-copied on the way
in and out so callers cannot mutate stored state.
"""

import bisect
import copy
from threading import Lock
from typing import Any, Dict, List, Optional

from clipcast.scheduling.state import ClipRecord
from clipcast.store.base import DocumentStore


class MemoryDocumentStore(DocumentStore):
    """Thread-safe dictionary-backed store."""

    def __init__(self):
        self._clips: Dict[str, ClipRecord] = {}
        self._numbers: List[int] = []
        self._by_number: Dict[int, ClipRecord] = {}
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()
        self.range_queries: List[tuple[int, int]] = []  # (start_at, limit) log

    def range_query(
        self,
        order_key: str = "number",
        start_at: int = 0,
        limit: int = 100,
    ) -> List[ClipRecord]:
        if order_key != "number":
            raise ValueError(f"Unsupported order key: {order_key}")

        with self._lock:
            self.range_queries.append((start_at, limit))
            if limit <= 0:
                return []
            index = bisect.bisect_left(self._numbers, start_at)
            numbers = self._numbers[index:index + limit]
            return [self._by_number[n] for n in numbers]

    def get_document(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._documents.get(key)
            return copy.deepcopy(document) if document is not None else None

    def set_document(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._documents[key] = copy.deepcopy(value)

    def put_clip(self, record: ClipRecord) -> None:
        with self._lock:
            previous = self._clips.get(record.id)
            if previous is not None:
                self._by_number.pop(previous.number, None)
                self._numbers.remove(previous.number)

            displaced = self._by_number.get(record.number)
            if displaced is not None:
                del self._clips[displaced.id]
            else:
                bisect.insort(self._numbers, record.number)

            self._clips[record.id] = record
            self._by_number[record.number] = record

    @property
    def document_keys(self) -> List[str]:
        with self._lock:
            return sorted(self._documents)
