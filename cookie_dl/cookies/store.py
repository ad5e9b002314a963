"""
Read-only cookie store that serves browser cookies to outgoing requests.
"""

import logging
from collections.abc import Iterable

import tldextract
from yarl import URL

from cookie_dl.browser.manager import CookieManager
from cookie_dl.exceptions import BrowserError
from cookie_dl.models.cookie import CookieRecord, RedactedCookies

from .matcher import cookie_matches_url

log = logging.getLogger(__name__)


def default_extractor() -> tldextract.TLDExtract:
    """An extractor using the bundled public suffix list, without network access."""
    return tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)


def format_cookie_header(cookies: Iterable[CookieRecord]) -> str:
    """Joins cookies into a single ``Cookie`` header value."""
    return "; ".join(cookie.header_pair for cookie in cookies)


class BrowserCookieStore:
    """
    Supplies the Cookie header for each outgoing request from a browser's store.

    Every lookup goes back to the browser: nothing is cached between
    requests, and cookies set by responses are ignored. Lookup failures
    degrade to sending no cookies so the request itself still goes out.
    """

    def __init__(
        self,
        cookie_manager: CookieManager,
        extractor: tldextract.TLDExtract | None = None,
    ):
        self.cookie_manager = cookie_manager
        self._extractor = extractor or default_extractor()

    def registrable_domain(self, url: URL | str) -> str | None:
        """Returns the domain plus public suffix of ``url``, e.g. ``example.co.uk``."""
        try:
            result = self._extractor(str(url))
        except Exception as e:
            log.warning(f"Failed to extract TLD information from URL: {url} ({e})")
            return None

        if not result.domain:
            log.warning(f"Failed to extract domain from URL: {url}")
            return None
        if not result.suffix:
            log.warning(f"Failed to extract suffix from URL: {url}")
            return None
        return f"{result.domain}.{result.suffix}"

    def matching_cookies(self, url: URL | str) -> list[CookieRecord]:
        """Returns the browser cookies that apply to ``url``, in source order."""
        domain = self.registrable_domain(url)
        if domain is None:
            return []
        log.debug(f"Extracted domain for cookie lookup: {domain}")

        try:
            cookies = self.cookie_manager.fetch_cookies_for_domain(domain)
        except BrowserError as e:
            log.warning(f"Failed to fetch cookies for domain {domain}: {e.brief_message()}")
            return []

        matching = []
        for cookie in cookies:
            if cookie_matches_url(cookie, url):
                log.debug(f"Cookie {cookie.name} matches URL {url}")
                matching.append(cookie)
            else:
                log.debug(
                    f"Cookie {cookie.name} does not match URL {url} "
                    f"(domain: {cookie.domain}, path: {cookie.path})"
                )
        return matching

    def cookies(self, url: URL | str) -> str | None:
        """
        Returns the Cookie header value for a request to ``url``.

        None means no cookie applies, including when the domain could not be
        determined or the browser could not be read.
        """
        log.debug(f"Fetching cookies for URL: {url}")
        matching = self.matching_cookies(url)
        if not matching:
            log.debug(f"No matching cookies found for URL: {url}")
            return None

        log.debug(
            f"Sending {len(matching)} matching cookies for URL: {url} "
            f"{RedactedCookies(matching)}"
        )
        return format_cookie_header(matching)

    def set_cookies(self, headers: Iterable[str], url: URL | str) -> None:
        """Discards ``Set-Cookie`` headers; the browser's store is never written."""
        log.debug(f"Discarding incoming cookies for URL: {url}")
