"""Helpers for Google Maps place pages."""

import json
import logging
import re
from typing import Any, List, Union
from urllib.parse import quote_plus

from gmaps_enricher.core.payload import FieldType, get_nth
from gmaps_enricher.etl.transform import MalformedPayloadError

logger = logging.getLogger(__name__)

_BASE_URL = "https://www.google.com/maps"
XSSI_PREFIX = ")]}'"
_APP_STATE_REGEX = re.compile(r"APP_INITIALIZATION_STATE\s*=\s*(\[.*?\]);\s*window\.", re.DOTALL)
_PLACE_STATE_PATH = (3, 6)


def build_place_url(query: str, lang: str = "en") -> str:
    """Seed URLs are fetched as is; anything else becomes a Maps search."""
    query = query.strip()
    if not query:
        raise ValueError("Query must be provided for Maps lookups.")
    if query.startswith(("http://", "https://")):
        return query
    return f"{_BASE_URL}/search/{quote_plus(query)}?hl={quote_plus(lang)}"


def _strip_xssi(text: str) -> str:
    text = text.lstrip()
    if text.startswith(XSSI_PREFIX):
        text = text[len(XSSI_PREFIX):]
    return text


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise MalformedPayloadError(f"place payload is not valid JSON: {exc}") from exc


def extract_place_payload(body: Union[bytes, str]) -> List[Any]:
    """Return the raw place array from a place page or a bare payload response."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    text = body or ""

    state_match = _APP_STATE_REGEX.search(text)
    if state_match:
        state = _loads(state_match.group(1))
        inner = get_nth(state, _PLACE_STATE_PATH)
        if not inner:
            raise MalformedPayloadError("page does not carry place data")
        payload = _loads(_strip_xssi(inner))
    elif text.lstrip().startswith((XSSI_PREFIX, "[")):
        payload = _loads(_strip_xssi(text))
    else:
        raise MalformedPayloadError("no place payload found in response")

    if not isinstance(payload, list):
        raise MalformedPayloadError("place payload is not an array")
    return payload
