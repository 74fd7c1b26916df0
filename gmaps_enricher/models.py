"""Core data models shared by the place enrichment pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class Platform(str, Enum):
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"

    @classmethod
    def matching(cls, url: str) -> List["Platform"]:
        """Platforms whose name appears somewhere in ``url``."""
        return [platform for platform in cls if platform.value in (url or "")]


@dataclass(slots=True)
class Address:
    street: str = ""
    number: str = ""

    def combined(self) -> str:
        return f"{self.street} {self.number}".strip()


@dataclass(slots=True)
class SocialLinks:
    """One URL slot per known platform; assigning a slot replaces its URL."""

    facebook: str = ""
    instagram: str = ""
    twitter: str = ""

    def get(self, platform: Platform) -> str:
        return getattr(self, platform.value)

    def set(self, platform: Platform, url: str) -> None:
        setattr(self, platform.value, url)

    def seed_from(self, url: str) -> None:
        for platform in Platform.matching(url):
            self.set(platform, url)

    def to_dict(self) -> Dict[str, str]:
        return {platform.value: self.get(platform) for platform in Platform if self.get(platform)}


CSV_HEADERS = (
    "title",
    "address",
    "city",
    "website",
    "phone",
    "emails",
    "facebook",
    "instagram",
    "twitter",
    "nip",
    "registry",
)


@dataclass(slots=True)
class BusinessRecord:
    """Normalized place listing decoded from a Maps payload and enriched later on."""

    id: str = ""
    link: str = ""
    title: str = ""
    address: Address = field(default_factory=Address)
    city: str = ""
    website: str = ""
    phone: str = ""
    emails: List[str] = field(default_factory=list)
    social_links: SocialLinks = field(default_factory=SocialLinks)
    tax_id: str = ""
    registry_data: Optional[Dict[str, Any]] = field(default=None, repr=False)

    def add_emails(self, emails: Iterable[str]) -> None:
        """Append emails not seen yet, keeping discovery order."""
        for email in emails:
            if email and email not in self.emails:
                self.emails.append(email)

    def set_tax_id(self, tax_id: str) -> None:
        if tax_id and not tax_id.isdigit():
            raise ValueError(f"tax id must contain digits only, got {tax_id!r}")
        self.tax_id = tax_id

    def set_registry_data(self, data: Dict[str, Any]) -> None:
        if not self.tax_id:
            raise ValueError("registry data requires a tax id")
        if self.registry_data is not None:
            raise ValueError(f"registry data already set for tax id {self.tax_id}")
        self.registry_data = data

    def is_website_valid_for_email(self) -> bool:
        """Social profile pages are not worth crawling for contact data."""
        if not self.website:
            return False
        return not Platform.matching(self.website)

    def csv_row(self) -> List[str]:
        registry = json.dumps(self.registry_data, ensure_ascii=False) if self.registry_data is not None else ""
        return [
            self.title,
            self.address.combined(),
            self.city,
            self.website,
            self.phone,
            ", ".join(self.emails),
            self.social_links.facebook,
            self.social_links.instagram,
            self.social_links.twitter,
            self.tax_id,
            registry,
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_id": self.id,
            "link": self.link,
            "title": self.title,
            "complete_address": {"street": self.address.street, "number": self.address.number},
            "city": self.city,
            "web_site": self.website,
            "phone": self.phone,
            "emails": list(self.emails),
            "social_links": self.social_links.to_dict(),
            "nip": self.tax_id,
            "registry": self.registry_data,
        }
