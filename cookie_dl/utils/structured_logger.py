"""
Structured event log for download sessions.
Writes one JSON object per line next to the regular console logging.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that emits both console messages and JSON-lines events.

    Usage:
        logger = StructuredLogger("cookie_dl", log_dir=Path("logs"))
        logger.info("download_completed", url="https://...", size_bytes=1024)

    Never pass cookie values as context; names are fine.
    """

    def __init__(self, name: str, log_dir: Path | None = None):
        self.name = name
        self.log_dir = log_dir
        self._logger = logging.getLogger(name)

        self._json_file = None
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"cookie_dl_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    @property
    def json_path(self) -> Path | None:
        return Path(self._json_file.name) if self._json_file else None

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all JSON entries."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [f"[{event}]"]
        parts.extend(f"{key}={value}" for key, value in context.items())
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }
        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _log(self, level: int, event: str, **context) -> None:
        self._logger.log(level, self._format_message(event, **context))
        self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._log(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._log(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        self._log(logging.WARNING, event, **context)

    def error(self, event: str, **context) -> None:
        self._log(logging.ERROR, event, **context)

    def close(self) -> None:
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class SessionLogger:
    """Specialized logger for download session events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def session_started(self, total_urls: int, max_workers: int, dry_run: bool = False):
        self.logger.info(
            "session_started",
            total_urls=total_urls,
            max_workers=max_workers,
            dry_run=dry_run,
        )

    def browser_selected(self, browser: str | None, mode: str):
        self.logger.info("browser_selected", browser=browser or "none", mode=mode)

    def download_completed(self, url: str, filename: str, size_bytes: int, duration_s: float):
        self.logger.debug(
            "download_completed",
            url=url,
            filename=filename,
            size_bytes=size_bytes,
            duration_s=round(duration_s, 2),
        )

    def download_failed(self, url: str, error: str, exit_code: int):
        self.logger.debug(
            "download_failed", url=url, error=error, exit_code=exit_code
        )

    def close(self):
        self.logger.close()

    def session_completed(
        self, duration_s: float, downloaded: int, failed: int, total_size_bytes: int
    ):
        self.logger.info(
            "session_completed",
            duration_s=round(duration_s, 2),
            files_downloaded=downloaded,
            files_failed=failed,
            total_size_bytes=total_size_bytes,
        )


def create_session_logger(log_dir: Path | None = None) -> SessionLogger:
    """Creates the session logger; JSON output is enabled only when ``log_dir`` is given."""
    return SessionLogger(StructuredLogger("cookie_dl.session", log_dir=log_dir))
