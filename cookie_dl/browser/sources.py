"""
Cookie sources backed by the browsers installed on this machine.

Each browser is described by a row in the probe tables below rather than by
its own class: the set of browsers is closed, so one ``BrowserSource``
dispatches on its ``BrowserType`` for path probing, platform policy and the
reader it calls.
"""

import logging
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import rookiepy

from cookie_dl.exceptions import BrowserNotAvailableError, CookieFetchError
from cookie_dl.models.cookie import CookieRecord, RedactedCookies

from .types import BrowserType

log = logging.getLogger(__name__)

Reader = Callable[[list[str]], list[dict[str, Any]]]

_CHROMIUM_ROOTS = {
    BrowserType.CHROME: {
        "linux": (".config", "google-chrome"),
        "darwin": ("Library", "Application Support", "Google", "Chrome"),
        "win32": ("AppData", "Local", "Google", "Chrome", "User Data"),
    },
    BrowserType.EDGE: {
        "linux": (".config", "microsoft-edge"),
        "darwin": ("Library", "Application Support", "Microsoft Edge"),
        "win32": ("AppData", "Local", "Microsoft", "Edge", "User Data"),
    },
}

_FIREFOX_PROFILE_DIRS = {
    "linux": (".mozilla", "firefox"),
    "darwin": ("Library", "Application Support", "Firefox", "Profiles"),
    "win32": ("AppData", "Roaming", "Mozilla", "Firefox", "Profiles"),
}

_SAFARI_COOKIE_FILE = ("Library", "Cookies", "Cookies.binarycookies")


def _os_family(platform: str) -> str:
    if platform.startswith("win") or platform == "cygwin":
        return "win32"
    if platform == "darwin":
        return "darwin"
    return "linux"


@runtime_checkable
class CookieSource(Protocol):
    """Anything that can hand out cookies for a set of domains."""

    browser_name: str

    def is_available(self) -> bool: ...

    def fetch_cookies(self, domains: Iterable[str]) -> list[CookieRecord]: ...


class BrowserSource:
    """Reads cookies from one locally installed browser."""

    def __init__(
        self,
        browser: BrowserType,
        *,
        reader: Reader | None = None,
        platform: str | None = None,
        home: Path | None = None,
    ):
        """
        Args:
            browser: Which browser to read.
            reader: Cookie-database reader. Defaults to the matching rookiepy
                function, looked up when cookies are first fetched.
            platform: A ``sys.platform`` style string; defaults to the
                running platform.
            home: Home directory to probe; defaults to ``Path.home()``.
        """
        self.browser = browser
        self._reader = reader
        self._platform = platform or sys.platform
        self._home = home

    @property
    def browser_name(self) -> str:
        return self.browser.value

    def __repr__(self) -> str:
        return f"BrowserSource({self.browser_name!r})"

    @property
    def os_family(self) -> str:
        return _os_family(self._platform)

    def _platform_supported(self) -> bool:
        return self.browser is not BrowserType.SAFARI or self.os_family == "darwin"

    def _resolve_home(self) -> Path | None:
        if self._home is not None:
            return self._home
        try:
            return Path.home()
        except (RuntimeError, KeyError, OSError):
            return None

    def candidate_paths(self, home: Path) -> list[Path]:
        """Returns the cookie-store locations probed for this browser and OS."""
        family = self.os_family
        if self.browser is BrowserType.SAFARI:
            return [home.joinpath(*_SAFARI_COOKIE_FILE)] if family == "darwin" else []
        if self.browser is BrowserType.FIREFOX:
            return [home.joinpath(*_FIREFOX_PROFILE_DIRS[family])]
        root = home.joinpath(*_CHROMIUM_ROOTS[self.browser][family])
        return [
            root / "Default" / "Cookies",
            root / "Default" / "Network" / "Cookies",
        ]

    def is_available(self) -> bool:
        """
        Checks whether this browser's cookie store exists on disk.

        Only the presence of a profile directory (Firefox) or cookie database
        file (everything else) is checked; the database is never opened, so
        a True result does not guarantee that fetching will succeed.
        """
        if not self._platform_supported():
            log.debug(f"{self.browser_name} availability check: unsupported platform")
            return False

        home = self._resolve_home()
        if home is None:
            log.debug(f"{self.browser_name} availability check: no home directory")
            return False

        if self.browser is BrowserType.FIREFOX:
            available = any(p.is_dir() for p in self.candidate_paths(home))
        else:
            available = any(p.is_file() for p in self.candidate_paths(home))
        log.debug(f"{self.browser_name} availability check: {available}")
        return available

    def _get_reader(self) -> Reader:
        if self._reader is None:
            self._reader = getattr(rookiepy, self.browser.value)
        return self._reader

    def fetch_cookies(self, domains: Iterable[str]) -> list[CookieRecord]:
        """
        Reads this browser's cookies for the given domain hints.

        Raises:
            BrowserNotAvailableError: Safari requested on a non-macOS platform.
            CookieFetchError: The reader failed or returned malformed records.
        """
        domain_list = list(domains)
        if not self._platform_supported():
            log.warning(
                f"{self.browser.display_name} cookie fetch attempted on an "
                f"unsupported platform for domains: {domain_list}"
            )
            raise BrowserNotAvailableError(self.browser_name)

        log.debug(
            f"Fetching cookies from {self.browser.display_name} for domains: "
            f"{domain_list}"
        )
        try:
            raw_cookies = self._get_reader()(domain_list)
            cookies = [CookieRecord.from_reader(raw) for raw in raw_cookies]
        except Exception as e:
            log.error(
                f"Failed to fetch cookies from {self.browser.display_name} for "
                f"domains {domain_list}: {e}"
            )
            raise CookieFetchError(self.browser_name, str(e)) from e

        log.info(
            f"Fetched {len(cookies)} cookies from {self.browser.display_name} "
            f"for domains: {domain_list}"
        )
        log.debug(f"{self.browser.display_name} cookies: {RedactedCookies(cookies)}")
        return cookies
