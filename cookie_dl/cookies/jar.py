"""
aiohttp cookie jar that pulls cookies from a BrowserCookieStore on every request.
"""

import logging
from collections.abc import Iterator
from http.cookies import BaseCookie, CookieError, Morsel, SimpleCookie
from types import MappingProxyType

from aiohttp.abc import AbstractCookieJar
from yarl import URL

from .store import BrowserCookieStore

log = logging.getLogger(__name__)


class BrowserCookieJar(AbstractCookieJar):
    """
    Read-only jar for ``aiohttp.ClientSession(cookie_jar=...)``.

    aiohttp asks the jar for cookies before each request, redirects included,
    and hands it every ``Set-Cookie`` response; the former is answered from
    the browser store and the latter is dropped.

    Must be created while an event loop is running, like any aiohttp jar.
    Each lookup reads the browser database on the calling thread; the
    downloader resolves headers in a worker thread instead.
    """

    def __init__(self, store: BrowserCookieStore, **kwargs):
        super().__init__(**kwargs)
        self.store = store

    @property
    def unsafe(self) -> bool:
        return False

    @property
    def quote_cookie(self) -> bool:
        return False

    @property
    def cookies(self):
        return MappingProxyType({})

    @property
    def host_only_cookies(self):
        return frozenset()

    def filter_cookies(self, request_url: URL) -> "BaseCookie[str]":
        filtered: SimpleCookie = SimpleCookie()
        for cookie in self.store.matching_cookies(request_url):
            if cookie.name in filtered:
                log.debug(f"Skipping duplicate cookie name {cookie.name} for {request_url}")
                continue
            morsel: Morsel = Morsel()
            try:
                morsel.set(cookie.name, cookie.value, cookie.value)
            except CookieError:
                log.debug(f"Skipping cookie with illegal name {cookie.name!r}")
                continue
            filtered[cookie.name] = morsel
        return filtered

    def update_cookies(self, cookies, response_url: URL = URL()) -> None:
        self.store.set_cookies(cookies, response_url)

    def clear(self, predicate=None) -> None:
        pass

    def clear_domain(self, domain: str) -> None:
        pass

    def __len__(self) -> int:
        return 0

    def __iter__(self) -> Iterator[Morsel]:
        return iter(())
