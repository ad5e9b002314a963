"""
Selects the browser whose cookies are used and brokers cookie fetches to it.
"""

import logging
from collections.abc import Callable

from cookie_dl.exceptions import (
    BrowserError,
    BrowserNotAvailableError,
    NoBrowsersAvailableError,
)
from cookie_dl.models.cookie import CookieRecord

from .sources import BrowserSource, CookieSource
from .types import BROWSER_PRIORITY, BrowserType

log = logging.getLogger(__name__)

SourceFactory = Callable[[BrowserType], CookieSource]


class CookieManager:
    """
    Owns exactly one cookie source for its whole lifetime.

    Use one of the constructors rather than ``__init__``:

    - ``explicit(browser)``: that browser or ``BrowserNotAvailableError``.
    - ``auto_detect()``: the first available browser in priority order.
    - ``with_fallback(preferred)``: the preferred browser if available,
      otherwise auto-detection.

    To switch browsers, build a new manager.
    """

    def __init__(self, source: CookieSource):
        self._source = source

    @property
    def source(self) -> CookieSource:
        return self._source

    @property
    def browser_name(self) -> str:
        """The name of the browser this manager reads from."""
        return self._source.browser_name

    def __repr__(self) -> str:
        return f"CookieManager(browser={self.browser_name!r})"

    @classmethod
    def with_source(cls, source: CookieSource) -> "CookieManager":
        """Binds an arbitrary cookie source without checking its availability."""
        return cls(source)

    @classmethod
    def explicit(
        cls, browser: BrowserType, source_factory: SourceFactory = BrowserSource
    ) -> "CookieManager":
        """
        Binds the given browser.

        Raises:
            BrowserNotAvailableError: If the browser's cookie store is not found.
        """
        log.debug(f"Creating cookie manager for browser: {browser}")
        source = source_factory(browser)
        if not source.is_available():
            log.warning(f"Selected browser {browser} is not available")
            raise BrowserNotAvailableError(browser.value)
        log.info(f"Using cookies from {browser}")
        return cls(source)

    @classmethod
    def auto_detect(
        cls, source_factory: SourceFactory = BrowserSource
    ) -> "CookieManager":
        """
        Binds the highest-priority browser that is available.

        Raises:
            NoBrowsersAvailableError: If no supported browser is found.
        """
        log.debug("Starting browser auto-detection")
        available = cls.detect_available_browsers(source_factory)
        if not available:
            log.warning("No browsers available during auto-detection")
            raise NoBrowsersAvailableError()
        log.info(f"Auto-detection selected: {available[0]}")
        return cls.explicit(available[0], source_factory)

    @classmethod
    def with_fallback(
        cls,
        preferred: BrowserType | None = None,
        source_factory: SourceFactory = BrowserSource,
    ) -> "CookieManager":
        """
        Binds the preferred browser, falling back to auto-detection.

        Only an unavailable preferred browser triggers the fallback; any other
        error is raised as-is. Without a preference this is ``auto_detect()``.
        """
        if preferred is not None:
            try:
                return cls.explicit(preferred, source_factory)
            except BrowserNotAvailableError:
                log.warning(
                    f"Preferred browser {preferred} not available, "
                    "falling back to auto-detection"
                )
        return cls.auto_detect(source_factory)

    @staticmethod
    def detect_available_browsers(
        source_factory: SourceFactory = BrowserSource,
    ) -> list[BrowserType]:
        """Probes every supported browser and returns the available ones in priority order."""
        available = []
        for browser in BROWSER_PRIORITY:
            if source_factory(browser).is_available():
                available.append(browser)
        log.debug(
            "Browser detection completed. Available browsers: "
            f"{[b.value for b in available]}"
        )
        return available

    def fetch_cookies_for_domain(self, domain: str) -> list[CookieRecord]:
        """
        Fetches the bound browser's cookies for a single domain.

        Failures are raised to the caller unchanged; nothing is retried or cached.
        """
        log.debug(f"Fetching cookies for domain: {domain} using {self.browser_name}")
        try:
            cookies = self._source.fetch_cookies([domain])
        except BrowserError as e:
            log.warning(
                f"Failed to fetch cookies for domain {domain}: {e.brief_message()}"
            )
            raise
        log.debug(f"Fetched {len(cookies)} cookies for domain: {domain}")
        return cookies
