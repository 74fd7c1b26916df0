"""HTTP and browser transport used by the job runner."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import requests
from bs4 import BeautifulSoup

try:
    from playwright.sync_api import TimeoutError as PlaywrightTimeoutError, sync_playwright
except ImportError:  # pragma: no cover - optional dependency
    sync_playwright = None
    PlaywrightTimeoutError = Exception

from gmaps_enricher.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0 Safari/537.36"
)


class FetchError(RuntimeError):
    """Transport failure or non-successful HTTP status for a job URL."""


@dataclass
class FetchResponse:
    url: str
    status_code: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    document: Optional[BeautifulSoup] = field(default=None, repr=False)
    error: Optional[Exception] = None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def soup(self) -> Optional[BeautifulSoup]:
        """Parsed markup, built from the body on first use when not supplied."""
        if self.document is None and self.body:
            self.document = BeautifulSoup(self.text, "html.parser")
        return self.document


class PlaywrightRenderer:
    """Thin wrapper around Playwright to render JavaScript-heavy pages."""

    def __init__(self, timeout_ms: int = 15000) -> None:
        if sync_playwright is None:
            raise RuntimeError("playwright is not installed")
        self._playwright = None
        self._browser = None
        self._timeout_ms = timeout_ms

    def _ensure_browser(self) -> None:
        if self._playwright is None:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(headless=True)

    def render(self, url: str) -> Tuple[str, str]:
        self._ensure_browser()
        page = self._browser.new_page()
        try:
            page.goto(url, wait_until="networkidle", timeout=self._timeout_ms)
            return page.url, page.content()
        finally:
            page.close()

    def close(self) -> None:
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None


class Fetcher:
    """Fetch job URLs, never raising: failures land on ``FetchResponse.error``."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", USER_AGENT)
        self.session.headers.setdefault("Accept-Language", f"{self.settings.lang},en;q=0.8")
        self._js_renderer: Optional[PlaywrightRenderer] = None
        # Playwright sync objects are bound to the thread that started them.
        self._js_executor: Optional[ThreadPoolExecutor] = None
        self._js_lock = threading.Lock()
        self.use_js_renderer = self.settings.use_js_renderer
        if self.use_js_renderer and sync_playwright is None:
            logger.warning("Playwright is unavailable; disabling JS renderer")
            self.use_js_renderer = False

    def fetch(self, job: Any) -> FetchResponse:
        if self.use_js_renderer and getattr(job, "render_js", False):
            return self._fetch_with_js(job.url)
        return self._fetch_http(job.method, job.url, headers=getattr(job, "headers", None))

    def _fetch_http(self, method: str, url: str, *, headers: Optional[Dict[str, str]] = None) -> FetchResponse:
        try:
            response = self.session.request(
                method,
                url,
                headers=headers or None,
                timeout=self.settings.request_timeout,
                allow_redirects=True,
            )
        except requests.RequestException as exc:  # noqa: BLE001
            logger.warning("Failed to fetch %s: %s", url, exc)
            return FetchResponse(url=url, error=FetchError(f"{url}: {exc}"))

        result = FetchResponse(
            url=response.url or url,
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content or b"",
        )
        if response.status_code >= 400:
            logger.warning("Fetching %s returned HTTP %s", url, response.status_code)
            result.error = FetchError(f"{url}: HTTP {response.status_code}")
        return result

    def _get_js_executor(self) -> ThreadPoolExecutor:
        with self._js_lock:
            if self._js_executor is None:
                self._js_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="playwright")
            return self._js_executor

    def _render(self, url: str) -> Tuple[str, str]:
        if self._js_renderer is None:
            self._js_renderer = PlaywrightRenderer(timeout_ms=self.settings.request_timeout * 1000)
        return self._js_renderer.render(url)

    def _fetch_with_js(self, url: str) -> FetchResponse:
        try:
            final_url, html = self._get_js_executor().submit(self._render, url).result()
        except PlaywrightTimeoutError:
            logger.warning("Playwright timed out fetching %s", url)
            return FetchResponse(url=url, error=FetchError(f"{url}: timed out"))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Playwright failed for %s: %s", url, exc)
            return FetchResponse(url=url, error=FetchError(f"{url}: {exc}"))
        return FetchResponse(url=final_url, status_code=200, body=html.encode("utf-8"))

    def _close_renderer(self) -> None:
        if self._js_renderer is not None:
            self._js_renderer.close()
            self._js_renderer = None

    def close(self) -> None:
        self.session.close()
        with self._js_lock:
            executor, self._js_executor = self._js_executor, None
        if executor is not None:
            executor.submit(self._close_renderer).result()
            executor.shutdown(wait=True)
        else:
            self._close_renderer()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401
        self.close()
