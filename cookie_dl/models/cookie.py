"""
Immutable cookie record as read from a browser's cookie store.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

REDACTED = "[REDACTED]"


class SameSite(str, Enum):
    """The SameSite attribute of a stored cookie."""

    NONE = "none"
    LAX = "lax"
    STRICT = "strict"

    @classmethod
    def from_raw(cls, raw: Any) -> "SameSite":
        """
        Converts a reader's same-site value into a SameSite member.

        Readers report either an integer (0 none, 1 lax, 2 strict) or a string.
        Anything unrecognised is treated as NONE.
        """
        if isinstance(raw, bool):
            return cls.NONE
        if isinstance(raw, int):
            return {1: cls.LAX, 2: cls.STRICT}.get(raw, cls.NONE)
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                return cls.NONE
        return cls.NONE


@dataclass(frozen=True)
class CookieRecord:
    """A single browser cookie, carried unchanged from the source to the matcher."""

    domain: str
    path: str
    name: str
    value: str
    http_only: bool = False
    secure: bool = False
    same_site: SameSite = SameSite.NONE
    expires: int | None = None

    @classmethod
    def from_reader(cls, raw: dict[str, Any]) -> "CookieRecord":
        """Builds a record from the dictionary returned by a cookie-database reader."""
        expires = raw.get("expires")
        return cls(
            domain=str(raw["domain"]),
            path=str(raw.get("path") or "/"),
            name=str(raw["name"]),
            value=str(raw.get("value", "")),
            http_only=bool(raw.get("http_only", False)),
            secure=bool(raw.get("secure", False)),
            same_site=SameSite.from_raw(raw.get("same_site")),
            expires=int(expires) if expires else None,
        )

    def __repr__(self) -> str:
        return (
            f"CookieRecord(domain={self.domain!r}, path={self.path!r}, "
            f"name={self.name!r}, value={REDACTED!r}, http_only={self.http_only}, "
            f"secure={self.secure}, same_site={self.same_site.value!r}, "
            f"expires={self.expires!r})"
        )

    @property
    def header_pair(self) -> str:
        """The ``name=value`` fragment used in a Cookie request header."""
        return f"{self.name}={self.value}"

    @property
    def redacted(self) -> str:
        return f"{self.name}={REDACTED}"


class RedactedCookies:
    """
    Log-safe view over a sequence of cookies.

    Formatting this object shows each cookie's name with its value replaced,
    so it can be passed to a logger without leaking session secrets.
    """

    __slots__ = ("_cookies",)

    def __init__(self, cookies: Iterable[CookieRecord]):
        self._cookies = tuple(cookies)

    def __str__(self) -> str:
        return "[" + ", ".join(c.redacted for c in self._cookies) + "]"

    __repr__ = __str__

    def __len__(self) -> int:
        return len(self._cookies)
