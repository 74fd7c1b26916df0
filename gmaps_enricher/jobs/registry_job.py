"""Fetch the registry entry for a NIP and attach it to the record."""

import logging

from gmaps_enricher.core.fetch import FetchResponse
from gmaps_enricher.core.store import RecordBusyError, RecordStore
from gmaps_enricher.jobs.base import Job, Priority, ProcessResult
from gmaps_enricher.vendors.registry import Registry, RegistryResponseError

logger = logging.getLogger(__name__)


class RegistryExtractJob(Job):
    def __init__(
        self,
        store: RecordStore,
        handle: str,
        tax_id: str,
        registry: Registry,
        *,
        parent_id: str = "",
    ) -> None:
        super().__init__(store, registry.build_url(tax_id), parent_id=parent_id, handle=handle, priority=Priority.HIGH)
        self.tax_id = tax_id
        self.registry = registry

    def prepare(self) -> None:
        # MissingCredentialError aborts this lookup only.
        self.headers.update(self.registry.headers())

    def process(self, response: FetchResponse) -> ProcessResult:
        logger.info("Processing %s registry job url=%s", self.registry.name, self.url)

        if response.error is not None:
            logger.warning("Registry lookup failed for NIP %s: %s", self.tax_id, response.error)
            return self.store.get(self.handle), [], response.error

        try:
            data = self.registry.parse(response.body)
        except RegistryResponseError as exc:
            logger.error("Error parsing %s registry response for NIP %s: %s", self.registry.name, self.tax_id, exc)
            return self.store.get(self.handle), [], exc

        if data is None:
            logger.info("Registry data not found url=%s", self.url)
            return self.store.get(self.handle), [], None

        try:
            with self.store.checkout(self.handle) as record:
                if not record.tax_id:
                    return record, [], None
                if record.registry_data is not None:
                    logger.info("Record for NIP %s already has registry data; skipping", record.tax_id)
                    return record, [], None
                record.set_registry_data(data)
        except RecordBusyError as exc:
            logger.error("Registry job for NIP %s could not lock its record: %s", self.tax_id, exc)
            return self.store.get(self.handle), [], exc

        return record, [], None
