"""
Browser Selection Layer.

This package decides which installed browser supplies cookies: the supported
browser identities, the per-browser cookie sources, and the CookieManager
that binds one of them using explicit, auto-detected or fallback selection.
"""

from .manager import CookieManager
from .sources import BrowserSource, CookieSource
from .types import BROWSER_PRIORITY, BrowserType

__all__ = [
    "BROWSER_PRIORITY",
    "BrowserSource",
    "BrowserType",
    "CookieManager",
    "CookieSource",
]
