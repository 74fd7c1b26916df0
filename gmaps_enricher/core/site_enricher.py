"""Website enrichment utilities for extracting public contact data."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Union
from urllib.parse import unquote

from bs4 import BeautifulSoup

from gmaps_enricher.models import Platform

logger = logging.getLogger(__name__)

EMAIL_REGEX = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
MAILTO_PREFIX = "mailto:"


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def get_valid_email(raw: str) -> str:
    """Return ``raw`` as a clean address, or an empty string when it is not one."""
    candidate = unquote((raw or "").split("?", 1)[0]).strip()
    if EMAIL_REGEX.fullmatch(candidate):
        return candidate
    return ""


def extract_mailto_emails(soup: BeautifulSoup) -> List[str]:
    """Valid addresses from ``mailto:`` anchors, in document order."""
    emails: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href.lower().startswith(MAILTO_PREFIX):
            continue
        email = get_valid_email(href[len(MAILTO_PREFIX):])
        if email:
            emails.append(email)
    return _unique(emails)


def extract_body_emails(body: Union[bytes, str]) -> List[str]:
    """Email-shaped substrings of a raw body, in order of appearance."""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    return _unique(match.group(0) for match in EMAIL_REGEX.finditer(body or ""))


def extract_emails(soup: BeautifulSoup, body: Union[bytes, str]) -> List[str]:
    """Prefer ``mailto:`` anchors and scan the raw body only when there are none."""
    emails = extract_mailto_emails(soup)
    if emails:
        return emails
    logger.debug("No mailto anchors found; scanning response body for emails")
    return extract_body_emails(body)


def extract_social_links(soup: BeautifulSoup) -> Dict[Platform, str]:
    """Map each platform to the last anchor target mentioning it."""
    results: Dict[Platform, str] = {}
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        for platform in Platform.matching(href):
            results[platform] = href
    return results
