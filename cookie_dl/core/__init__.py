"""
Core download engine.

The `DownloadManager` coordinates a session of concurrent downloads and
delegates each individual file to the `Downloader`.
"""

from .download_manager import DownloadManager
from .downloader import Downloader, filename_from_url

__all__ = ["DownloadManager", "Downloader", "filename_from_url"]
