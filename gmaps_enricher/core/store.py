"""In-memory arena holding every record that still has pending jobs."""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from gmaps_enricher.models import BusinessRecord

logger = logging.getLogger(__name__)


class RecordBusyError(RuntimeError):
    """Raised when a second job tries to mutate a record that is checked out."""


class UnknownRecordError(KeyError):
    """Raised for handles that were never issued or whose record is complete."""


@dataclass
class _Slot:
    record: BusinessRecord
    refs: int = 1
    busy: bool = False


class RecordStore:
    """Owns records by handle; jobs only carry the handle.

    A record is added with one reference held by the job that created it.
    Each child job retains a reference before its parent releases, and the
    record is complete when the last reference is released.
    """

    def __init__(self) -> None:
        self._slots: Dict[str, _Slot] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __contains__(self, handle: str) -> bool:
        with self._lock:
            return handle in self._slots

    def add(self, record: BusinessRecord) -> str:
        handle = uuid.uuid4().hex
        with self._lock:
            self._slots[handle] = _Slot(record=record)
        return handle

    def _slot(self, handle: str) -> _Slot:
        try:
            return self._slots[handle]
        except KeyError:
            raise UnknownRecordError(handle) from None

    def get(self, handle: str) -> BusinessRecord:
        with self._lock:
            return self._slot(handle).record

    def retain(self, handle: str) -> None:
        with self._lock:
            self._slot(handle).refs += 1

    def release(self, handle: str) -> Optional[BusinessRecord]:
        """Drop one reference; returns the record once nothing references it."""
        with self._lock:
            slot = self._slot(handle)
            slot.refs -= 1
            if slot.refs > 0:
                return None
            del self._slots[handle]
        logger.debug("Record %s complete", handle)
        return slot.record

    @contextmanager
    def checkout(self, handle: str) -> Iterator[BusinessRecord]:
        """Exclusive mutable access to a record for the duration of the block."""
        with self._lock:
            slot = self._slot(handle)
            if slot.busy:
                raise RecordBusyError(f"record {handle} is already being mutated")
            slot.busy = True
        try:
            yield slot.record
        finally:
            with self._lock:
                slot.busy = False
