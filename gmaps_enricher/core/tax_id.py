"""Polish NIP (tax identifier) detection in free text.

Matches the two conventional groupings, 123-456-78-90 and 123-45-67-890,
with hyphens or spaces. The check digit is not verified, so any ten digit
number written in one of these groupings is accepted.
"""

import re
from typing import Union

TAX_ID_REGEX = re.compile(rb"(\d{3}[- ]\d{3}[- ]\d{2}[- ]\d{2})|(\d{3}[- ]\d{2}[- ]\d{2}[- ]\d{3})")


def clean_tax_id(value: str) -> str:
    return value.replace("-", "").replace(" ", "")


def extract_tax_id(body: Union[bytes, str]) -> str:
    if isinstance(body, str):
        body = body.encode("utf-8")
    match = TAX_ID_REGEX.search(body or b"")
    if match is None:
        return ""
    return clean_tax_id(match.group(0).decode("ascii"))
