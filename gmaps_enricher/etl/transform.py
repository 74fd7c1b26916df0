"""Utilities for transforming Google Maps place payloads into business records."""

import logging
from typing import Any, Sequence

from gmaps_enricher.core.payload import FieldType, get_nth, is_array
from gmaps_enricher.etl.address import split_address
from gmaps_enricher.models import BusinessRecord

logger = logging.getLogger(__name__)

MIN_PAYLOAD_LENGTH = 7
PLACE_INDEX = 6

# Index paths inside the place array at PLACE_INDEX.
ID_PATH = (0,)
LINK_PATH = (1,)
EMAILS_PATH = (5,)
WEBSITE_PATH = (7, 0)
TITLE_PATH = (11,)
FULL_ADDRESS_PATH = (18,)
PHONE_PATH = (178, 0, 0)
CITY_PATH = (183, 1, 3)


class MalformedPayloadError(ValueError):
    """Raised when a payload does not have the place array where it is expected."""


def record_from_payload(raw: Sequence[Any]) -> BusinessRecord:
    """Decode one place payload.

    Only the outer shape is checked strictly. Every field is read through
    ``get_nth`` so a missing or odd field comes back empty without
    affecting the others.
    """
    if not is_array(raw) or len(raw) < MIN_PAYLOAD_LENGTH:
        raise MalformedPayloadError(
            f"expected an array with at least {MIN_PAYLOAD_LENGTH} elements"
        )

    place = raw[PLACE_INDEX]
    if not is_array(place):
        raise MalformedPayloadError(f"element {PLACE_INDEX} of the payload is not an array")

    website = get_nth(place, WEBSITE_PATH)
    record = BusinessRecord(
        id=get_nth(place, ID_PATH),
        link=get_nth(place, LINK_PATH),
        title=get_nth(place, TITLE_PATH),
        address=split_address(get_nth(place, FULL_ADDRESS_PATH)),
        city=get_nth(place, CITY_PATH),
        website=website,
        phone=get_nth(place, PHONE_PATH),
    )
    record.add_emails(get_nth(place, EMAILS_PATH, FieldType.STRING_LIST))
    record.social_links.seed_from(website)

    logger.debug("Decoded place %r (website=%s)", record.title, record.website or "-")
    return record
