"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

REGISTRY_PROVIDERS = ("mf", "ceidg")


class ConfigError(RuntimeError):
    """Raised when configuration values cannot be used."""


def _default_concurrency() -> int:
    return max(1, (os.cpu_count() or 2) // 2)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    registry_provider: str = "mf"
    ceidg_api_token: str = ""
    concurrency: int = 1
    lang: str = "en"
    request_timeout: int = 10
    extract_emails: bool = False
    use_js_renderer: bool = False
    worker_port: int = 8015
    seed_template_path: str = "seed_template.txt"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    registry_provider = os.getenv("REGISTRY_PROVIDER", "mf").strip().lower()
    if registry_provider not in REGISTRY_PROVIDERS:
        raise ConfigError(
            f"REGISTRY_PROVIDER must be one of {', '.join(REGISTRY_PROVIDERS)}, got {registry_provider!r}"
        )
    ceidg_api_token = os.getenv("CEIDG_API_TOKEN", "").strip()
    concurrency = int(os.getenv("WORKER_CONCURRENCY") or _default_concurrency())
    lang = os.getenv("WORKER_LANG", "en")
    request_timeout = int(os.getenv("REQUEST_TIMEOUT", "10"))
    extract_emails = _env_flag("EXTRACT_EMAILS", "false")
    use_js_renderer = _env_flag("ENRICH_USE_JS_RENDERER", "false")
    worker_port = int(os.getenv("WORKER_PORT", "8015"))
    seed_template_path = os.getenv("SEED_TEMPLATE_PATH", "seed_template.txt")

    if registry_provider == "ceidg" and not ceidg_api_token:
        logger.warning("CEIDG_API_TOKEN is not configured; CEIDG registry lookups will be aborted.")

    return Settings(
        registry_provider=registry_provider,
        ceidg_api_token=ceidg_api_token,
        concurrency=max(1, concurrency),
        lang=lang,
        request_timeout=request_timeout,
        extract_emails=extract_emails,
        use_js_renderer=use_js_renderer,
        worker_port=worker_port,
        seed_template_path=seed_template_path,
    )
