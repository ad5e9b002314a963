from cookie_dl.exceptions import (
    BrowserError,
    BrowserNotAvailableError,
    ConfigurationError,
    CookieDlError,
    CookieFetchError,
    HTTPClientError,
    HTTPServerError,
    InvalidConfigurationError,
    NoBrowsersAvailableError,
    NoFilenameError,
    UnsupportedBrowserError,
)


def test_unsupported_browser_message():
    error = UnsupportedBrowserError("opera")
    assert str(error) == (
        "Browser 'opera' is not supported. "
        "Available browsers: chrome, firefox, safari, edge"
    )
    assert error.brief_message() == "Unsupported browser: opera"
    assert error.kind == "unsupported_browser"


def test_browser_not_available_message():
    error = BrowserNotAvailableError("safari")
    assert str(error) == "Browser 'safari' is not available or installed"
    assert error.brief_message() == "Browser not available: safari"


def test_no_browsers_available_message():
    error = NoBrowsersAvailableError()
    assert "chrome, firefox, safari, edge" in str(error)
    assert error.brief_message() == "No browsers available"


def test_cookie_fetch_error_message():
    error = CookieFetchError("firefox", "database is locked")
    assert str(error) == "Failed to fetch cookies from firefox: database is locked"
    assert error.brief_message() == "Cookie fetch failed for firefox: database is locked"


def test_invalid_configuration_is_also_a_configuration_error():
    error = InvalidConfigurationError("browser name cannot be empty")
    assert isinstance(error, BrowserError)
    assert isinstance(error, ConfigurationError)
    assert error.brief_message() == "Invalid configuration: browser name cannot be empty"


def test_all_errors_share_the_root():
    for error in (
        UnsupportedBrowserError("x"),
        NoBrowsersAvailableError(),
        NoFilenameError("no name"),
        HTTPClientError(404, "Not Found"),
    ):
        assert isinstance(error, CookieDlError)


def test_http_errors_carry_exit_codes():
    assert HTTPClientError(404, "Not Found").exit_code == 2
    assert str(HTTPClientError(404, "Not Found")) == "Got HTTP error: 404 Not Found"
    assert HTTPServerError(503, None).exit_code == 1
    assert str(HTTPServerError(503, None)) == "Got HTTP server error: 503"
    assert NoFilenameError("x").exit_code == 3
