"""
cookie-dl: a command-line downloader that reuses your browser's cookies.
"""

__version__ = "0.3.0"
