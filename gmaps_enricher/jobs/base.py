"""Job abstraction shared by the runner and the three job kinds."""

from __future__ import annotations

import uuid
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from gmaps_enricher.core.fetch import FetchResponse
from gmaps_enricher.core.store import RecordStore
from gmaps_enricher.models import BusinessRecord


class Priority(IntEnum):
    HIGH = 0
    MEDIUM = 1
    LOW = 2


ProcessResult = Tuple[Optional[BusinessRecord], List["Job"], Optional[Exception]]


class Job:
    """One fetch followed by ``process`` on the response.

    ``handle`` points at the record this job works on inside ``store``; it is
    empty for a place job until the record has been decoded.
    """

    method = "GET"
    render_js = False

    def __init__(
        self,
        store: RecordStore,
        url: str,
        *,
        parent_id: str = "",
        handle: str = "",
        priority: Priority = Priority.MEDIUM,
        max_retries: int = 0,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self.store = store
        self.url = url
        self.parent_id = parent_id
        self.handle = handle
        self.priority = priority
        self.max_retries = max_retries
        self.headers: Dict[str, str] = dict(headers or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r}, handle={self.handle!r})"

    def prepare(self) -> None:
        """Hook run before the fetch; raising aborts the job."""

    def process_on_fetch_error(self) -> bool:
        return False

    def process(self, response: FetchResponse) -> ProcessResult:
        raise NotImplementedError
