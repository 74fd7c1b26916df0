"""Thread-pool executor driving place, email and registry jobs."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from gmaps_enricher.core.fetch import Fetcher
from gmaps_enricher.core.store import RecordStore
from gmaps_enricher.jobs.base import Job
from gmaps_enricher.jobs.place_job import PlaceJob
from gmaps_enricher.models import BusinessRecord
from gmaps_enricher.vendors.registry import Registry, RegistryError

logger = logging.getLogger(__name__)

ID_SEPARATOR = "#!#"


class ResultWriter(Protocol):
    def write(self, record: BusinessRecord) -> None: ...


@dataclass
class RunStats:
    jobs: int = 0
    job_errors: int = 0
    records: int = 0


def parse_seed_line(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(query, input_id)`` for a seed line, or ``None`` when blank."""
    query = line.strip()
    if not query:
        return None
    input_id = ""
    if ID_SEPARATOR in query:
        query, input_id = (part.strip() for part in query.split(ID_SEPARATOR, 1))
    return query, input_id


def create_seed_jobs(
    store: RecordStore,
    lines: Iterable[str],
    *,
    lang: str = "en",
    extract_email: bool = False,
    registry: Optional[Registry] = None,
) -> List[Job]:
    jobs: List[Job] = []
    for line_number, line in enumerate(lines, start=1):
        seed = parse_seed_line(line)
        if seed is None:
            logger.debug("Skipping blank seed line %d", line_number)
            continue
        query, input_id = seed
        jobs.append(
            PlaceJob(store, query, input_id=input_id, lang=lang, extract_email=extract_email, registry=registry)
        )
    logger.info("Created %d seed jobs", len(jobs))
    return jobs


def read_seed_file(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8") as fh:
        return fh.readlines()


class JobRunner:
    """Runs jobs concurrently while keeping each record's chain sequential.

    A child job is only queued after its parent has returned, so a record
    never has two jobs mutating it at once. Finished records go to every
    writer exactly once.
    """

    def __init__(
        self,
        store: RecordStore,
        fetcher: Fetcher,
        writers: Iterable[ResultWriter],
        *,
        concurrency: int = 1,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.writers = list(writers)
        self.concurrency = max(1, concurrency)
        self.stats = RunStats()
        self._stats_lock = threading.Lock()
        self._pending: List[Tuple[int, int, Job]] = []
        self._counter = itertools.count()

    def _count(self, field_name: str) -> None:
        with self._stats_lock:
            setattr(self.stats, field_name, getattr(self.stats, field_name) + 1)

    def _push(self, job: Job) -> None:
        heapq.heappush(self._pending, (int(job.priority), next(self._counter), job))

    def run(self, seed_jobs: Iterable[Job]) -> RunStats:
        for job in seed_jobs:
            self._push(job)

        with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
            running: Dict[Future, Job] = {}
            while self._pending or running:
                while self._pending and len(running) < self.concurrency:
                    _, _, job = heapq.heappop(self._pending)
                    running[pool.submit(self.execute, job)] = job

                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for future in done:
                    running.pop(future)
                    for child in future.result():
                        self._push(child)

        logger.info(
            "Run finished: jobs=%d job_errors=%d records=%d",
            self.stats.jobs,
            self.stats.job_errors,
            self.stats.records,
        )
        return self.stats

    def execute(self, job: Job) -> List[Job]:
        """Fetch and process one job; never raises."""
        self._count("jobs")
        children: List[Job] = []
        try:
            children = self._execute(job)
        except Exception as exc:  # noqa: BLE001
            self._count("job_errors")
            logger.exception("Job %r failed: %s", job, exc)
            children = []

        for child in children:
            self.store.retain(child.handle)
        if job.handle:
            self._release(job.handle)
        return children

    def _execute(self, job: Job) -> List[Job]:
        try:
            job.prepare()
        except RegistryError as exc:
            self._count("job_errors")
            logger.error("Aborting %r: %s", job, exc)
            return []

        response = self.fetcher.fetch(job)
        if response.error is not None and not job.process_on_fetch_error():
            self._count("job_errors")
            logger.warning("Fetch failed for %r: %s", job, response.error)
            return []

        _, children, error = job.process(response)
        if error is not None:
            self._count("job_errors")
            logger.warning("Job %r finished with error: %s", job, error)
        return children

    def _release(self, handle: str) -> None:
        record = self.store.release(handle)
        if record is None:
            return
        self._count("records")
        for writer in self.writers:
            try:
                writer.write(record)
            except Exception as exc:  # noqa: BLE001
                self._count("job_errors")
                logger.exception("Writer %r failed for record %r: %s", writer, record.id, exc)
