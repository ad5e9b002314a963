"""
Manages a Rich progress display for concurrent downloads.
"""

import logging
from datetime import datetime

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

log = logging.getLogger("cookie_dl")


class ProgressManager:
    """One progress bar per active download, plus session counters."""

    def __init__(self, console: Console, dry_run: bool = False):
        self.console = console
        self.dry_run = dry_run

        self.progress = Progress(
            TextColumn("[blue]{task.description}", justify="left"),
            BarColumn(bar_width=None, complete_style="blue", finished_style="green"),
            "[magenta]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=False,
        )

        self._started = False
        self._active_tasks: set[TaskID] = set()
        self._stats = {
            "completed": 0,
            "failed": 0,
            "active_downloads": 0,
            "peak_concurrent": 0,
            "start_time": None,
        }

    def log_message(self, message: str, level: str = "info"):
        """Unified logging respecting dry_run mode."""
        if self.dry_run:
            style_map = {
                "info": "cyan",
                "warning": "yellow",
                "error": "red",
                "success": "green",
            }
            style = style_map.get(level, "")
            self.console.print(f"[{style}]{message}[/{style}]" if style else message)
        else:
            getattr(log, level, log.info)(message)

    def add_task(self, filename: str, total_size: int | None = None) -> TaskID | None:
        if self.dry_run:
            return None
        if len(filename) > 40:
            filename = filename[:37] + "..."
        task_id = self.progress.add_task(filename, total=total_size, start=True)
        self._active_tasks.add(task_id)
        self._stats["active_downloads"] = len(self._active_tasks)
        self._stats["peak_concurrent"] = max(
            self._stats["peak_concurrent"], self._stats["active_downloads"]
        )
        return task_id

    def update_task_progress(self, task_id: TaskID, completed: int):
        if task_id is not None and not self.dry_run:
            self.progress.update(task_id, completed=completed)

    def update_task_total(self, task_id: TaskID, total: int | None):
        if task_id is not None and not self.dry_run:
            self.progress.update(task_id, total=total)

    def remove_task(self, task_id: TaskID | None, success: bool = True):
        if success:
            self._stats["completed"] += 1
        else:
            self._stats["failed"] += 1
        if task_id is None or self.dry_run:
            return
        self._active_tasks.discard(task_id)
        self._stats["active_downloads"] = len(self._active_tasks)
        if not success:
            self.progress.remove_task(task_id)

    def get_statistics(self) -> dict:
        return self._stats.copy()

    async def __aenter__(self):
        self._stats["start_time"] = datetime.now()
        if not self.dry_run:
            self.progress.start()
            self._started = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._started:
            self.progress.stop()
            self._started = False
