"""
Data Models Layer.

This package contains the core data structures used throughout the
application: cookie records, configuration and session statistics.
"""

from .config import DownloadConfig
from .cookie import CookieRecord, RedactedCookies, SameSite
from .stats import DownloadStats

__all__ = [
    "CookieRecord",
    "DownloadConfig",
    "DownloadStats",
    "RedactedCookies",
    "SameSite",
]
