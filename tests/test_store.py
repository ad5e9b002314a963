import logging

import pytest

from cookie_dl.cookies import BrowserCookieStore, format_cookie_header
from cookie_dl.exceptions import CookieFetchError

from .conftest import make_cookie


@pytest.fixture
def store_for(fake_manager):
    def _build(cookies=(), error=None):
        return BrowserCookieStore(fake_manager(cookies=cookies, error=error))

    return _build


def test_matching_cookies_produce_header(store_for):
    store = store_for([make_cookie("example.com", "/", "test", "dummy")])
    assert store.cookies("https://example.com/") == "test=dummy"


def test_no_matching_cookies_is_none(store_for):
    store = store_for([make_cookie("different.com")])
    assert store.cookies("https://example.com/") is None


def test_path_filtering(store_for):
    store = store_for([make_cookie("example.com", "/api", "token", "abc")])
    assert store.cookies("https://example.com/api/users") == "token=abc"
    assert store.cookies("https://example.com/public") is None


def test_subdomain_cookies(store_for):
    store = store_for([make_cookie(".example.com", "/", "session", "xyz")])
    assert store.cookies("https://api.example.com/") == "session=xyz"


def test_fetch_error_degrades_to_none(store_for):
    store = store_for(error=CookieFetchError("chrome", "database is locked"))
    assert store.cookies("https://example.com/") is None


def test_empty_cookie_list_is_none(store_for):
    assert store_for([]).cookies("https://example.com/") is None


def test_lookup_uses_registrable_domain(fake_manager):
    manager = fake_manager()
    BrowserCookieStore(manager).cookies("https://a.b.example.co.uk/page")
    assert manager.source.fetch_calls == [["example.co.uk"]]


@pytest.mark.parametrize("url", ["http://localhost:8080/", "http://127.0.0.1/file"])
def test_hosts_without_public_suffix_send_nothing(fake_manager, url):
    manager = fake_manager(cookies=[make_cookie("localhost")])
    assert BrowserCookieStore(manager).cookies(url) is None
    assert manager.source.fetch_calls == []


def test_header_round_trip_keeps_source_order(store_for):
    store = store_for(
        [
            make_cookie("example.com", "/", "first", "1"),
            make_cookie("other.com", "/", "skipped", "x"),
            make_cookie(".example.com", "/", "second", "2"),
            make_cookie("example.com", "/admin", "admin", "y"),
            make_cookie("example.com", "/", "third", "3"),
        ]
    )
    header = store.cookies("https://www.example.com/index.html")
    assert header.split("; ") == ["first=1", "second=2", "third=3"]


def test_set_cookies_is_inert(fake_manager):
    manager = fake_manager()
    BrowserCookieStore(manager).set_cookies(["a=b; Path=/"], "https://example.com/")
    assert manager.source.fetch_calls == []


def test_format_cookie_header():
    cookies = [make_cookie("x.com", name="a", value="1"), make_cookie("x.com", name="b", value="2")]
    assert format_cookie_header(cookies) == "a=1; b=2"
    assert format_cookie_header([]) == ""


def test_lookup_logs_never_contain_values(store_for, caplog):
    caplog.set_level(logging.DEBUG, logger="cookie_dl")
    store = store_for([make_cookie("example.com", "/", "sid", "s3cret")])
    assert store.cookies("https://example.com/") == "sid=s3cret"
    assert "s3cret" not in caplog.text
