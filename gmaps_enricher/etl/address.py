"""Split a Maps "full address" string into street and number."""

import re

from gmaps_enricher.models import Address

# "<venue>, <street and number>[, NN-NNN][, anything]"
_ADDRESS_REGEX = re.compile(r"^(.*?),\s*(.*?)(?:, \d{2}-\d{3})?(?:, .+)?$")


def split_address(full_address: str) -> Address:
    match = _ADDRESS_REGEX.match(full_address or "")
    if match is None:
        return Address()

    segment = match.group(2)
    parts = re.split(r"\s+", segment, maxsplit=1)
    if len(parts) > 1:
        return Address(street=parts[0], number=parts[1])
    return Address(street=parts[0])
