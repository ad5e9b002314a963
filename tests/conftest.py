"""
Shared fixtures: in-memory cookie sources and a factory that hands them out.
"""

from collections.abc import Iterable

import pytest

from cookie_dl.browser import BrowserType, CookieManager
from cookie_dl.exceptions import BrowserError
from cookie_dl.models.cookie import CookieRecord


def make_cookie(domain: str, path: str = "/", name: str = "test", value: str = "dummy"):
    return CookieRecord(domain=domain, path=path, name=name, value=value)


class FakeSource:
    """Cookie source with a fixed availability flag and cookie list."""

    def __init__(
        self,
        browser_name: str = "chrome",
        available: bool = True,
        cookies: Iterable[CookieRecord] = (),
        error: BrowserError | None = None,
        availability_error: BrowserError | None = None,
    ):
        self.browser_name = browser_name
        self.available = available
        self.cookies = list(cookies)
        self.error = error
        self.availability_error = availability_error
        self.probes = 0
        self.fetch_calls: list[list[str]] = []

    def is_available(self) -> bool:
        self.probes += 1
        if self.availability_error is not None:
            raise self.availability_error
        return self.available

    def fetch_cookies(self, domains):
        self.fetch_calls.append(list(domains))
        if self.error is not None:
            raise self.error
        return list(self.cookies)


class FakeSourceFactory:
    """Callable standing in for ``BrowserSource``; one FakeSource per browser."""

    def __init__(self, available: Iterable[BrowserType] = ()):
        available = set(available)
        self.sources = {
            browser: FakeSource(browser.value, available=browser in available)
            for browser in BrowserType
        }
        self.created: list[BrowserType] = []

    def __call__(self, browser: BrowserType) -> FakeSource:
        self.created.append(browser)
        return self.sources[browser]

    def probes(self) -> dict[BrowserType, int]:
        return {b: s.probes for b, s in self.sources.items() if s.probes}


@pytest.fixture
def fake_manager():
    """Builds a CookieManager bound to a FakeSource."""

    def _build(cookies=(), error=None, browser_name="chrome"):
        source = FakeSource(browser_name, cookies=cookies, error=error)
        return CookieManager.with_source(source)

    return _build
