"""
Handles the low-level downloading of files over HTTP with retries and
progress reporting.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import aiohttp
from aiohttp import hdrs
from pathvalidate import sanitize_filename
from rich.progress import TaskID
from yarl import URL

from cookie_dl.cli.progress_manager import ProgressManager
from cookie_dl.cookies.store import BrowserCookieStore
from cookie_dl.exceptions import (
    DownloadError,
    HTTPClientError,
    HTTPServerError,
    NoFilenameError,
)

log = logging.getLogger(__name__)


def filename_from_url(url: str) -> str:
    """
    Returns a safe local file name taken from the last path segment of ``url``.

    Raises:
        DownloadError: If the URL is not an absolute http(s) URL.
        NoFilenameError: If the URL path does not end in a file name.
    """
    try:
        parsed = URL(url)
    except (TypeError, ValueError) as e:
        raise DownloadError(f"Invalid URL '{url}': {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise DownloadError(f"Invalid URL '{url}': expected an http(s) URL")

    filename = sanitize_filename(parsed.name.strip(), platform="auto")
    if not filename:
        raise NoFilenameError(
            f"Cannot download '{url}': it doesn't have a file name, so we don't know "
            "what to save it as."
        )
    return filename


class Downloader:
    """A low-level file downloader with retry logic."""

    CHUNK_SIZE = 131072  # 128 KB
    MAX_REDIRECTS = 10
    REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.5):
        self.max_attempts = max_attempts
        self.base_delay = base_delay

    @staticmethod
    def _raise_for_status(response: aiohttp.ClientResponse) -> None:
        if response.status >= 500:
            raise HTTPServerError(response.status, response.reason)
        if response.status >= 400:
            raise HTTPClientError(response.status, response.reason)

    @staticmethod
    async def _cookie_headers(
        cookie_store: BrowserCookieStore | None, url: URL
    ) -> dict[str, str]:
        # The browser database read is blocking.
        if cookie_store is None:
            return {}
        header = await asyncio.to_thread(cookie_store.cookies, url)
        return {hdrs.COOKIE: header} if header else {}

    def _redirect_target(self, response: aiohttp.ClientResponse, url: URL) -> URL | None:
        if response.status not in self.REDIRECT_STATUSES:
            return None
        location = response.headers.get(hdrs.LOCATION)
        if not location:
            return None
        try:
            target = url.join(URL(location))
        except ValueError as e:
            raise DownloadError(f"Invalid redirect from '{url}': {e}") from e
        if target.scheme not in ("http", "https"):
            raise DownloadError(f"Refusing to follow redirect from '{url}' to '{target}'")
        return target

    async def download_file(
        self,
        session: aiohttp.ClientSession,
        url: str,
        destination_path: Path,
        progress_manager: ProgressManager | None = None,
        task_id: TaskID | None = None,
        cookie_store: BrowserCookieStore | None = None,
    ) -> int:
        """
        Downloads ``url`` to ``destination_path`` and returns the number of bytes written.

        Data is streamed into a ``.part`` file that is renamed on success and
        removed on failure. Network errors are retried with exponential
        backoff; HTTP error statuses are not.

        Redirects are followed here rather than by aiohttp so that the
        ``Cookie`` header of every hop is resolved for that hop's URL, in a
        worker thread.
        """
        part_path = destination_path.with_name(destination_path.name + ".part")
        last_exception: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                bytes_downloaded = await self._fetch(
                    session, URL(url), part_path, cookie_store, progress_manager, task_id
                )
                await asyncio.to_thread(os.replace, part_path, destination_path)
                return bytes_downloaded
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                log.debug(
                    f"Download attempt {attempt}/{self.max_attempts} for "
                    f"'{destination_path.name}' failed: {e}. Retrying..."
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))
            except (DownloadError, OSError):
                await self._discard_partial(part_path)
                raise

        await self._discard_partial(part_path)
        raise DownloadError(
            f"Failed to download '{url}' after {self.max_attempts} attempts: "
            f"{last_exception}"
        ) from last_exception

    async def _fetch(
        self,
        session: aiohttp.ClientSession,
        url: URL,
        part_path: Path,
        cookie_store: BrowserCookieStore | None,
        progress_manager: ProgressManager | None,
        task_id: TaskID | None,
    ) -> int:
        current = url
        for _ in range(self.MAX_REDIRECTS + 1):
            headers = await self._cookie_headers(cookie_store, current)
            async with session.get(
                current, headers=headers, allow_redirects=False
            ) as response:
                target = self._redirect_target(response, current)
                if target is None:
                    self._raise_for_status(response)
                    return await self._write_body(
                        response, part_path, progress_manager, task_id
                    )
            log.debug(f"Following redirect from {current} to {target}")
            current = target
        raise DownloadError(
            f"Too many redirects for '{url}' (more than {self.MAX_REDIRECTS})"
        )

    async def _write_body(
        self,
        response: aiohttp.ClientResponse,
        part_path: Path,
        progress_manager: ProgressManager | None,
        task_id: TaskID | None,
    ) -> int:
        total_size = response.content_length or 0
        if progress_manager and task_id is not None:
            progress_manager.update_task_total(task_id, total=total_size or None)

        bytes_downloaded = 0
        async with aiofiles.open(part_path, "wb") as f:
            async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                await f.write(chunk)
                bytes_downloaded += len(chunk)
                if progress_manager and task_id is not None:
                    progress_manager.update_task_progress(
                        task_id, completed=bytes_downloaded
                    )
        return bytes_downloaded

    @staticmethod
    async def _discard_partial(part_path: Path) -> None:
        try:
            await asyncio.to_thread(part_path.unlink, missing_ok=True)
        except OSError as e:
            log.debug(f"Could not remove partial file '{part_path}': {e}")
