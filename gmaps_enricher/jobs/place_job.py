"""Decode a fetched Google Maps place page into a business record."""

import logging
from typing import List, Optional

from gmaps_enricher.core.fetch import FetchResponse
from gmaps_enricher.core.store import RecordStore
from gmaps_enricher.etl.transform import MalformedPayloadError, record_from_payload
from gmaps_enricher.jobs.base import Job, Priority, ProcessResult
from gmaps_enricher.jobs.email_job import EmailExtractJob
from gmaps_enricher.vendors.gmaps import build_place_url, extract_place_payload
from gmaps_enricher.vendors.registry import Registry

logger = logging.getLogger(__name__)


class PlaceJob(Job):
    render_js = True

    def __init__(
        self,
        store: RecordStore,
        query: str,
        *,
        input_id: str = "",
        lang: str = "en",
        extract_email: bool = False,
        registry: Optional[Registry] = None,
    ) -> None:
        super().__init__(store, build_place_url(query, lang), priority=Priority.LOW)
        self.query = query
        self.input_id = input_id
        self.extract_email = extract_email
        self.registry = registry

    def process(self, response: FetchResponse) -> ProcessResult:
        logger.info("Processing place job url=%s", self.url)

        if response.error is not None:
            return None, [], response.error

        try:
            record = record_from_payload(extract_place_payload(response.body))
        except MalformedPayloadError as exc:
            logger.warning("Could not decode place payload for %s: %s", self.url, exc)
            return None, [], exc

        if self.input_id:
            record.id = self.input_id
        self.handle = self.store.add(record)

        children: List[Job] = []
        if self.extract_email and record.is_website_valid_for_email():
            children.append(EmailExtractJob(self.store, self.handle, record.website, parent_id=self.id, registry=self.registry))
        return record, children, None
