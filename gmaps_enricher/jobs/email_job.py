"""Mine a business website for emails, social profiles and a NIP."""

import logging
from typing import List, Optional

from gmaps_enricher.core.fetch import FetchResponse
from gmaps_enricher.core.site_enricher import extract_emails, extract_social_links
from gmaps_enricher.core.store import RecordBusyError, RecordStore
from gmaps_enricher.core.tax_id import extract_tax_id
from gmaps_enricher.jobs.base import Job, Priority, ProcessResult
from gmaps_enricher.jobs.registry_job import RegistryExtractJob
from gmaps_enricher.vendors.registry import Registry, get_registry

logger = logging.getLogger(__name__)


class EmailExtractJob(Job):
    def __init__(
        self,
        store: RecordStore,
        handle: str,
        website: str,
        *,
        parent_id: str = "",
        registry: Optional[Registry] = None,
    ) -> None:
        super().__init__(store, website, parent_id=parent_id, handle=handle, priority=Priority.HIGH)
        self.registry = registry

    def process_on_fetch_error(self) -> bool:
        return True

    def process(self, response: FetchResponse) -> ProcessResult:
        logger.info("Processing email job url=%s", self.url)
        try:
            return self._process(response)
        finally:
            response.document = None
            response.body = b""

    def _process(self, response: FetchResponse) -> ProcessResult:
        if response.error is not None:
            logger.info("Website fetch failed for %s, keeping record as is: %s", self.url, response.error)
            return self.store.get(self.handle), [], None

        soup = response.soup()
        if soup is None:
            return self.store.get(self.handle), [], None

        children: List[Job] = []
        try:
            with self.store.checkout(self.handle) as record:
                record.add_emails(extract_emails(soup, response.body))
                for platform, url in extract_social_links(soup).items():
                    record.social_links.set(platform, url)

                record.set_tax_id(extract_tax_id(response.body))
                if record.tax_id:
                    registry = self.registry or get_registry()
                    children.append(RegistryExtractJob(self.store, self.handle, record.tax_id, registry, parent_id=self.id))
        except RecordBusyError as exc:
            logger.error("Email job for %s could not lock its record: %s", self.url, exc)
            return self.store.get(self.handle), [], exc

        return record, children, None
