"""
Defines custom exceptions for the application to allow for more specific error handling.

Browser selection and cookie retrieval failures share the ``BrowserError``
base; its ``kind`` tag identifies which of the five failure modes occurred.
"""

SUPPORTED_BROWSER_NAMES = ("chrome", "firefox", "safari", "edge")


class CookieDlError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(CookieDlError):
    """Raised for issues related to configuration loading or validation."""


class BrowserError(CookieDlError):
    """Base exception for browser selection and cookie retrieval failures."""

    kind = "browser_error"

    def brief_message(self) -> str:
        """Returns a single-line description suitable for log output."""
        return str(self)


class UnsupportedBrowserError(BrowserError):
    """Raised when a browser name does not match any supported browser."""

    kind = "unsupported_browser"

    def __init__(self, browser: str):
        self.browser = browser
        super().__init__(
            f"Browser '{browser}' is not supported. "
            f"Available browsers: {', '.join(SUPPORTED_BROWSER_NAMES)}"
        )

    def brief_message(self) -> str:
        return f"Unsupported browser: {self.browser}"


class BrowserNotAvailableError(BrowserError):
    """Raised when the requested browser has no cookie store on this system."""

    kind = "browser_not_available"

    def __init__(self, browser: str):
        self.browser = browser
        super().__init__(f"Browser '{browser}' is not available or installed")

    def brief_message(self) -> str:
        return f"Browser not available: {self.browser}"


class NoBrowsersAvailableError(BrowserError):
    """Raised when auto-detection finds no usable browser at all."""

    kind = "no_browsers_available"

    def __init__(self):
        super().__init__(
            "No supported browsers found. Please install one of: "
            f"{', '.join(SUPPORTED_BROWSER_NAMES)}"
        )

    def brief_message(self) -> str:
        return "No browsers available"


class CookieFetchError(BrowserError):
    """Raised when a browser's cookie database cannot be read."""

    kind = "cookie_fetch_error"

    def __init__(self, browser: str, message: str):
        self.browser = browser
        self.message = str(message)
        super().__init__(f"Failed to fetch cookies from {browser}: {self.message}")

    def brief_message(self) -> str:
        return f"Cookie fetch failed for {self.browser}: {self.message}"


class InvalidConfigurationError(BrowserError, ConfigurationError):
    """Raised when the browser selection input is malformed."""

    kind = "invalid_configuration"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid browser configuration: {detail}")

    def brief_message(self) -> str:
        return f"Invalid configuration: {self.detail}"


class DownloadError(CookieDlError):
    """Raised when a single URL cannot be downloaded."""

    exit_code = 1


class NoFilenameError(DownloadError):
    """Raised when a URL has no final path segment to use as a file name."""

    exit_code = 3


class HTTPClientError(DownloadError):
    """Raised when the server answers with a 4xx status."""

    exit_code = 2

    def __init__(self, status: int, reason: str | None):
        self.status = status
        self.reason = reason or ""
        super().__init__(f"Got HTTP error: {status} {self.reason}".rstrip())


class HTTPServerError(DownloadError):
    """Raised when the server answers with a 5xx status."""

    exit_code = 1

    def __init__(self, status: int, reason: str | None):
        self.status = status
        self.reason = reason or ""
        super().__init__(f"Got HTTP server error: {status} {self.reason}".rstrip())
