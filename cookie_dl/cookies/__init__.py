"""
Request Cookie Layer.

This package decides which browser cookies go on each outgoing request and
hands them to the HTTP client.
"""

from .jar import BrowserCookieJar
from .matcher import cookie_matches_url
from .store import BrowserCookieStore, format_cookie_header

__all__ = [
    "BrowserCookieJar",
    "BrowserCookieStore",
    "cookie_matches_url",
    "format_cookie_header",
]
