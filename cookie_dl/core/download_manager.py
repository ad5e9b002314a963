"""
The main orchestrator for expanding URL lists and managing the download queue.
"""

import asyncio
import logging
import time
from pathlib import Path

import aiohttp
from rich.markup import escape

from cookie_dl.cli.progress_manager import ProgressManager
from cookie_dl.cookies.store import BrowserCookieStore
from cookie_dl.exceptions import DownloadError
from cookie_dl.models.config import DownloadConfig
from cookie_dl.models.stats import DownloadStats
from cookie_dl.utils.structured_logger import SessionLogger

from .downloader import Downloader, filename_from_url

log = logging.getLogger(__name__)


class DownloadManager:
    """Orchestrates the entire download process."""

    def __init__(
        self,
        config: DownloadConfig,
        cookie_store: BrowserCookieStore | None,
        progress_manager: ProgressManager,
        session_logger: SessionLogger | None = None,
        downloader: Downloader | None = None,
    ):
        self.config = config
        self.cookie_store = cookie_store
        self.progress_manager = progress_manager
        self.session_logger = session_logger
        self.downloader = downloader or Downloader()
        self.stats = DownloadStats(dry_run=config.dry_run)
        self.start_time = time.monotonic()
        self.semaphore = asyncio.Semaphore(config.max_workers)

    def expand_source_urls(self) -> list[str]:
        """
        Resolves the configured sources into a de-duplicated list of URLs.

        A source naming an existing file is read as a URL list, one per line;
        blank lines and ``#`` comments are skipped.
        """
        expanded_urls = []
        for source in self.config.source_urls:
            if Path(source).is_file():
                log.info(f"Reading URLs from file: [dim]{escape(source)}[/dim]")
                try:
                    with open(source, encoding="utf-8") as f:
                        expanded_urls.extend(
                            line.strip()
                            for line in f
                            if line.strip() and not line.lstrip().startswith("#")
                        )
                except (OSError, UnicodeDecodeError) as e:
                    log.error(f"[red]Could not read file {escape(source)}: {e}[/red]")
            else:
                expanded_urls.append(source)

        unique_urls = list(dict.fromkeys(expanded_urls))
        if len(unique_urls) < len(expanded_urls):
            log.info(f"Removed {len(expanded_urls) - len(unique_urls)} duplicate URLs.")
        return unique_urls

    async def execute_downloads(self) -> DownloadStats:
        """Downloads every configured URL and returns the session statistics."""
        urls = self.expand_source_urls()
        if not urls:
            log.warning("[yellow]No URLs to process. Exiting.[/yellow]")
            return self.stats

        if self.session_logger:
            self.session_logger.session_started(
                total_urls=len(urls),
                max_workers=self.config.max_workers,
                dry_run=self.config.dry_run,
            )

        output_dir = Path(self.config.output_dir)
        if not self.config.dry_run:
            output_dir.mkdir(parents=True, exist_ok=True)

        # Cookies are attached per request by the downloader; the session keeps none.
        headers = {"Accept": "*/*", "User-Agent": self.config.user_agent}
        async with aiohttp.ClientSession(
            headers=headers, cookie_jar=aiohttp.DummyCookieJar()
        ) as session:
            await asyncio.gather(
                *(self._process_url(session, url, output_dir) for url in urls)
            )

        if self.session_logger:
            self.session_logger.session_completed(
                duration_s=time.monotonic() - self.start_time,
                downloaded=self.stats.files_downloaded,
                failed=self.stats.files_failed,
                total_size_bytes=self.stats.total_size_downloaded,
            )
        return self.stats

    async def _process_url(
        self, session: aiohttp.ClientSession, url: str, output_dir: Path
    ) -> None:
        async with self.semaphore:
            started = time.monotonic()
            try:
                filename = filename_from_url(url)
            except DownloadError as e:
                await self._record_failure(url, e)
                return

            destination = output_dir / filename
            if self.config.dry_run:
                self.progress_manager.log_message(
                    f"[DRY RUN] Would download {escape(url)} -> {escape(str(destination))}"
                )
                self.progress_manager.remove_task(None, success=True)
                await self.stats.record_success(0)
                return

            task_id = self.progress_manager.add_task(filename)
            try:
                size = await self.downloader.download_file(
                    session,
                    url,
                    destination,
                    self.progress_manager,
                    task_id,
                    cookie_store=self.cookie_store,
                )
            except (DownloadError, OSError) as e:
                self.progress_manager.remove_task(task_id, success=False)
                await self._record_failure(url, e)
                return

            self.progress_manager.remove_task(task_id, success=True)
            await self.stats.record_success(size)
            log.info(f"[green]✓[/green] Saved {escape(str(destination))}")
            if self.session_logger:
                self.session_logger.download_completed(
                    url=url,
                    filename=filename,
                    size_bytes=size,
                    duration_s=time.monotonic() - started,
                )

    async def _record_failure(self, url: str, error: Exception) -> None:
        exit_code = getattr(error, "exit_code", 1)
        log.error(f"[red]✗ {escape(str(error))}[/red]")
        await self.stats.record_failure(url, str(error), exit_code=exit_code)
        if self.session_logger:
            self.session_logger.download_failed(
                url=url, error=str(error), exit_code=exit_code
            )
