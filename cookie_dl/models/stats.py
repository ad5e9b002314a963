"""
Dataclass for tracking download session statistics.
"""

import asyncio
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks the outcome of every URL in a download session."""

    files_downloaded: int = 0
    files_failed: int = 0
    total_size_downloaded: int = 0
    dry_run: bool = False
    failures: dict[str, str] = field(default_factory=dict)
    exit_codes: list[int] = field(default_factory=list, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_success(self, size_bytes: int) -> None:
        async with self._lock:
            self.files_downloaded += 1
            self.total_size_downloaded += size_bytes

    async def record_failure(self, url: str, reason: str, exit_code: int = 1) -> None:
        async with self._lock:
            self.files_failed += 1
            self.failures[url] = reason
            self.exit_codes.append(exit_code)

    @property
    def exit_code(self) -> int:
        """The process exit code for this session; the highest failure code wins."""
        return max(self.exit_codes, default=0)
