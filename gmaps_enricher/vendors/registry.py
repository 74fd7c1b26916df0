"""Clients for the Polish business registries keyed by NIP.

Two interchangeable integrations are supported:

* ``mf``: the Ministry of Finance VAT white list. Public, needs the lookup
  date in the query string and answers ``{"result": {"subject": {...}}}``.
* ``ceidg``: the CEIDG companies API. Needs a bearer token and answers
  ``{"firmy": [...]}``.

Both normalize their answer into a plain dict, or ``None`` when the registry
has no entry for the identifier.
"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from gmaps_enricher.core.config import Settings, get_settings
from gmaps_enricher.core.tax_id import clean_tax_id

logger = logging.getLogger(__name__)

MF_URL = "https://wl-api.mf.gov.pl/api/search/nip/{nip}?date={date}"
CEIDG_URL = "https://dane.biznes.gov.pl/api/ceidg/v2/firmy?nip={nip}"


class RegistryError(RuntimeError):
    """Base class for registry lookup failures."""


class RegistryResponseError(RegistryError):
    """Raised when a registry answers with something other than a JSON object."""


class MissingCredentialError(RegistryError):
    """Raised when a registry needs a credential that is not configured."""


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def parse_json_object(body: Union[bytes, str]) -> Dict[str, Any]:
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise RegistryResponseError(f"registry response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise RegistryResponseError(f"registry response is a {type(payload).__name__}, expected an object")
    return payload


class WhiteListRegistry:
    name = "mf"

    def __init__(self, today: Optional[date] = None) -> None:
        self._today = today

    def build_url(self, tax_id: str) -> str:
        today = self._today or date.today()
        return MF_URL.format(nip=clean_tax_id(tax_id), date=today.strftime("%Y-%m-%d"))

    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    def parse(self, body: Union[bytes, str]) -> Optional[Dict[str, Any]]:
        result = parse_json_object(body).get("result")
        if not isinstance(result, dict) or not result:
            return None

        subject = result.get("subject") if "subject" in result else result
        if not isinstance(subject, dict) or not (subject.get("name") or subject.get("nip")):
            return None

        return {
            "name": _as_str(subject.get("name")),
            "nip": _as_str(subject.get("nip")),
            "statusVat": _as_str(subject.get("statusVat")),
            "regon": _as_str(subject.get("regon")),
            "residenceAddress": _as_str(subject.get("residenceAddress") or subject.get("workingAddress")),
            "registrationLegalDate": _as_str(subject.get("registrationLegalDate")),
        }


class CeidgRegistry:
    name = "ceidg"

    def __init__(self, api_token: str) -> None:
        self._api_token = api_token

    def build_url(self, tax_id: str) -> str:
        return CEIDG_URL.format(nip=clean_tax_id(tax_id))

    def headers(self) -> Dict[str, str]:
        if not self._api_token:
            raise MissingCredentialError("CEIDG_API_TOKEN is required for CEIDG lookups")
        return {"Accept": "application/json", "Authorization": f"Bearer {self._api_token}"}

    @staticmethod
    def _company(raw: Dict[str, Any]) -> Dict[str, Any]:
        owner = raw.get("wlasciciel") or {}
        address = raw.get("adresDzialalnosci") or {}
        return {
            "id": _as_str(raw.get("id")),
            "name": _as_str(raw.get("nazwa")),
            "nip": _as_str(owner.get("nip")),
            "regon": _as_str(owner.get("regon")),
            "owner": {
                "firstName": _as_str(owner.get("imie")),
                "lastName": _as_str(owner.get("nazwisko")),
            },
            "address": {
                "street": _as_str(address.get("ulica")),
                "building": _as_str(address.get("budynek")),
                "unit": _as_str(address.get("lokal")),
                "city": _as_str(address.get("miasto")),
                "postalCode": _as_str(address.get("kod")),
                "country": _as_str(address.get("kraj")),
            },
            "startDate": _as_str(raw.get("dataRozpoczecia")),
            "status": _as_str(raw.get("status")),
            "link": _as_str(raw.get("link")),
        }

    def parse(self, body: Union[bytes, str]) -> Optional[Dict[str, Any]]:
        companies = parse_json_object(body).get("firmy")
        if not isinstance(companies, list):
            return None
        normalized: List[Dict[str, Any]] = [self._company(raw) for raw in companies if isinstance(raw, dict)]
        if not normalized:
            return None
        return {"companies": normalized}


Registry = Union[WhiteListRegistry, CeidgRegistry]


def get_registry(settings: Optional[Settings] = None) -> Registry:
    settings = settings or get_settings()
    if settings.registry_provider == "ceidg":
        return CeidgRegistry(settings.ceidg_api_token)
    return WhiteListRegistry()
