import logging

import pytest

from cookie_dl.browser import BrowserSource, BrowserType, CookieSource
from cookie_dl.exceptions import BrowserNotAvailableError, CookieFetchError
from cookie_dl.models.cookie import REDACTED, SameSite


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def _unexpected_reader(domains):
    raise AssertionError("reader must not be called")


# --- Availability probes ---


def test_chrome_linux_default_cookies_file(tmp_path):
    _touch(tmp_path / ".config" / "google-chrome" / "Default" / "Cookies")
    source = BrowserSource(BrowserType.CHROME, platform="linux", home=tmp_path)
    assert source.is_available()


def test_chrome_network_cookies_file(tmp_path):
    _touch(tmp_path / ".config" / "google-chrome" / "Default" / "Network" / "Cookies")
    source = BrowserSource(BrowserType.CHROME, platform="linux", home=tmp_path)
    assert source.is_available()


def test_chrome_directory_in_place_of_file_is_not_available(tmp_path):
    (tmp_path / ".config" / "google-chrome" / "Default" / "Cookies").mkdir(parents=True)
    source = BrowserSource(BrowserType.CHROME, platform="linux", home=tmp_path)
    assert not source.is_available()


def test_missing_store_is_not_available(tmp_path):
    for browser in (BrowserType.CHROME, BrowserType.FIREFOX, BrowserType.EDGE):
        assert not BrowserSource(browser, platform="linux", home=tmp_path).is_available()


def test_firefox_requires_profile_directory(tmp_path):
    (tmp_path / ".mozilla" / "firefox").mkdir(parents=True)
    source = BrowserSource(BrowserType.FIREFOX, platform="linux", home=tmp_path)
    assert source.is_available()


def test_firefox_macos_profiles(tmp_path):
    (tmp_path / "Library" / "Application Support" / "Firefox" / "Profiles").mkdir(
        parents=True
    )
    source = BrowserSource(BrowserType.FIREFOX, platform="darwin", home=tmp_path)
    assert source.is_available()


def test_edge_windows_cookies_file(tmp_path):
    _touch(
        tmp_path
        / "AppData"
        / "Local"
        / "Microsoft"
        / "Edge"
        / "User Data"
        / "Default"
        / "Cookies"
    )
    source = BrowserSource(BrowserType.EDGE, platform="win32", home=tmp_path)
    assert source.is_available()


def test_safari_is_never_available_off_macos(tmp_path):
    _touch(tmp_path / "Library" / "Cookies" / "Cookies.binarycookies")
    source = BrowserSource(BrowserType.SAFARI, platform="linux", home=tmp_path)
    assert not source.is_available()


def test_safari_on_macos(tmp_path):
    _touch(tmp_path / "Library" / "Cookies" / "Cookies.binarycookies")
    source = BrowserSource(BrowserType.SAFARI, platform="darwin", home=tmp_path)
    assert source.is_available()


def test_unresolvable_home_is_not_available(monkeypatch):
    def _no_home():
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr("cookie_dl.browser.sources.Path.home", _no_home)
    assert not BrowserSource(BrowserType.CHROME, platform="linux").is_available()


def test_browser_source_satisfies_protocol():
    assert isinstance(BrowserSource(BrowserType.EDGE), CookieSource)


# --- Fetching ---


def test_fetch_converts_reader_records():
    seen = []

    def reader(domains):
        seen.append(domains)
        return [
            {
                "domain": ".example.com",
                "path": "/",
                "name": "sid",
                "value": "s3cret",
                "http_only": True,
                "secure": True,
                "same_site": 1,
                "expires": 1893456000,
            },
            {"domain": "example.com", "path": None, "name": "theme", "value": "dark"},
        ]

    source = BrowserSource(BrowserType.CHROME, reader=reader, platform="linux")
    cookies = source.fetch_cookies(["example.com"])

    assert seen == [["example.com"]]
    assert [c.name for c in cookies] == ["sid", "theme"]
    assert cookies[0].http_only and cookies[0].secure
    assert cookies[0].same_site is SameSite.LAX
    assert cookies[0].expires == 1893456000
    assert cookies[1].path == "/"
    assert cookies[1].expires is None


def test_fetch_wraps_reader_failure():
    def reader(domains):
        raise OSError("database is locked")

    source = BrowserSource(BrowserType.FIREFOX, reader=reader, platform="linux")
    with pytest.raises(CookieFetchError) as exc_info:
        source.fetch_cookies(["example.com"])

    assert exc_info.value.browser == "firefox"
    assert exc_info.value.message == "database is locked"
    assert isinstance(exc_info.value.__cause__, OSError)


def test_fetch_wraps_malformed_records():
    source = BrowserSource(
        BrowserType.EDGE, reader=lambda domains: [{"path": "/"}], platform="win32"
    )
    with pytest.raises(CookieFetchError):
        source.fetch_cookies(["example.com"])


def test_safari_fetch_off_macos_does_not_call_reader():
    source = BrowserSource(
        BrowserType.SAFARI, reader=_unexpected_reader, platform="linux"
    )
    with pytest.raises(BrowserNotAvailableError) as exc_info:
        source.fetch_cookies(["example.com"])
    assert exc_info.value.browser == "safari"


def test_fetch_logs_never_contain_values(caplog):
    caplog.set_level(logging.DEBUG, logger="cookie_dl")
    reader = lambda domains: [  # noqa: E731
        {"domain": "example.com", "path": "/", "name": "sid", "value": "s3cret"}
    ]
    source = BrowserSource(BrowserType.CHROME, reader=reader, platform="linux")
    cookies = source.fetch_cookies(["example.com"])

    assert "s3cret" not in caplog.text
    assert f"sid={REDACTED}" in caplog.text
    assert "s3cret" not in repr(cookies[0])
