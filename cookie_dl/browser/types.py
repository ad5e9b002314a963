"""
Identities of the supported browsers and their fixed detection priority.
"""

from enum import Enum

from cookie_dl.exceptions import InvalidConfigurationError, UnsupportedBrowserError


class BrowserType(str, Enum):
    """A browser whose cookie store can be used for requests."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    SAFARI = "safari"
    EDGE = "edge"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def all(cls) -> list["BrowserType"]:
        """Returns every supported browser in detection priority order."""
        return list(BROWSER_PRIORITY)

    @classmethod
    def parse(cls, token: str) -> "BrowserType":
        """
        Parses a user-supplied browser name.

        Names are matched case-insensitively after trimming whitespace.

        Raises:
            InvalidConfigurationError: If the token is empty.
            UnsupportedBrowserError: If the token names an unknown browser.
        """
        name = (token or "").strip()
        if not name:
            raise InvalidConfigurationError("browser name cannot be empty")
        try:
            return cls(name.lower())
        except ValueError:
            raise UnsupportedBrowserError(name) from None


# Auto-detection order. Every browser appears exactly once.
BROWSER_PRIORITY: tuple[BrowserType, ...] = (
    BrowserType.CHROME,
    BrowserType.FIREFOX,
    BrowserType.SAFARI,
    BrowserType.EDGE,
)
