"""
Functions for formatting and displaying data in the console using Rich.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cookie_dl.browser import BROWSER_PRIORITY, BrowserType, CookieManager
from cookie_dl.exceptions import (
    BrowserError,
    BrowserNotAvailableError,
    CookieFetchError,
    InvalidConfigurationError,
    NoBrowsersAvailableError,
    UnsupportedBrowserError,
)
from cookie_dl.models.stats import DownloadStats
from cookie_dl.utils.formatting import format_duration, format_size

_INSTALL_TIPS = {
    "chrome": [
        "• Download from https://www.google.com/chrome/",
        "• Make sure to run Chrome at least once after installation",
    ],
    "firefox": [
        "• Download from https://www.mozilla.org/firefox/",
        "• Make sure to run Firefox at least once after installation",
    ],
    "safari": [
        "• Safari is pre-installed on macOS",
        "• Make sure to run Safari at least once",
        "• Note: Safari is only available on macOS",
    ],
    "edge": [
        "• Download from https://www.microsoft.com/edge/",
        "• Make sure to run Edge at least once after installation",
    ],
}


def _all_names() -> list[str]:
    return [b.value for b in BROWSER_PRIORITY]


def _available_names(
    available: Sequence[BrowserType] | None, exclude: str | None = None
) -> list[str]:
    if available is None:
        available = CookieManager.detect_available_browsers()
    return [b.value for b in available if b.value != exclude]


def _fetch_remedies(message: str) -> list[str]:
    msg = message.lower()
    if "database" in msg and "lock" in msg:
        return [
            "• Close all browser windows and try again",
            "• The browser's cookie database might be locked",
        ]
    if "permission" in msg or "access" in msg:
        return [
            "• Check file permissions for browser data directory",
            "• Try running with appropriate permissions",
        ]
    if "not found" in msg or "no such file" in msg:
        return [
            "• Make sure the browser has been run at least once",
            "• Browser profile might not exist yet",
        ]
    return [
        "• Try closing the browser and running the command again",
        "• Check if the browser profile exists",
    ]


def explain_browser_error(
    error: BrowserError, available: Sequence[BrowserType] | None = None
) -> str:
    """
    Builds a multi-line explanation of a browser error for the terminal.

    Args:
        error: The browser error to explain.
        available: The browsers found on this system. Detected on demand
            when omitted, which probes the filesystem.
    """
    if isinstance(error, UnsupportedBrowserError):
        return (
            f"Browser '{error.browser}' is not supported. "
            f"Available browsers: {', '.join(_all_names())}"
        )

    if isinstance(error, BrowserNotAvailableError):
        tips = _INSTALL_TIPS.get(
            error.browser,
            ["• Make sure the browser is installed and has been run at least once"],
        )
        lines = [
            f"Browser '{error.browser}' is not available or installed.",
            "",
            "Installation help:",
            *(f"   {tip}" for tip in tips),
        ]
        if alternatives := _available_names(available):
            lines += [
                "",
                f"Available alternatives: {', '.join(alternatives)}",
                f"Tip: Try --browser {alternatives[0]} instead",
            ]
        return "\n".join(lines)

    if isinstance(error, NoBrowsersAvailableError):
        return "\n".join(
            [
                "No supported browsers found on your system.",
                "",
                f"Supported browsers: {', '.join(_all_names())}",
                "",
                "Installation help:",
                "• Chrome: https://www.google.com/chrome/",
                "• Firefox: https://www.mozilla.org/firefox/",
                "• Safari: Pre-installed on macOS",
                "• Edge: https://www.microsoft.com/edge/",
                "",
                "Tip: After installing a browser, run it at least once to create "
                "cookie storage.",
            ]
        )

    if isinstance(error, CookieFetchError):
        lines = [
            f"Failed to fetch cookies from {error.browser}.",
            "",
            f"Error details: {error.message}",
            "",
            "Common solutions:",
            *(f"   {remedy}" for remedy in _fetch_remedies(error.message)),
        ]
        if alternatives := _available_names(available, exclude=error.browser):
            lines += [
                "",
                "Try a different browser:",
                f"   • Available: {', '.join(alternatives)}",
                f"   • Example: --browser {alternatives[0]}",
            ]
        return "\n".join(lines)

    if isinstance(error, InvalidConfigurationError):
        return "\n".join(
            [
                f"Invalid browser configuration: {error.detail}",
                "",
                f"Valid options: {', '.join(_all_names())}",
                "",
                "Tips:",
                "• Use --browser <name> to specify a browser",
                "• Browser names are case-insensitive",
                "• Example: --browser chrome",
            ]
        )

    return str(error)


def browser_error_suggestions(
    error: BrowserError, available: Sequence[BrowserType] | None = None
) -> list[str]:
    """Returns short, actionable suggestions for resolving a browser error."""
    if isinstance(error, UnsupportedBrowserError):
        return [f"--browser {name}" for name in _all_names()]
    if isinstance(error, BrowserNotAvailableError):
        suggestions = [f"Install {error.browser} browser"]
        if alternatives := _available_names(available):
            suggestions.append(f"Use --browser {alternatives[0]}")
        return suggestions
    if isinstance(error, NoBrowsersAvailableError):
        return [
            "Install Chrome, Firefox, Safari, or Edge",
            "Run the browser at least once after installation",
        ]
    if isinstance(error, CookieFetchError):
        return [f"Close {error.browser} and try again"] + [
            f"Try --browser {name}"
            for name in _available_names(available, exclude=error.browser)
        ]
    if isinstance(error, InvalidConfigurationError):
        return [f"Use --browser {name}" for name in _all_names()]
    return []


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__

    if isinstance(error, BrowserError):
        error_msg = explain_browser_error(error)
        suggestions = [f"• {s}" for s in browser_error_suggestions(error)]
    else:
        error_msg = str(error)
        suggestions_map = {
            "ConfigurationError": [
                "• Check the values in your configuration file.",
                "• Run `cookie-dl init --force` to write a fresh default file.",
            ],
            "ClientConnectorError": [
                "• Could not connect to the server.",
                "• Check your internet connection and the URL.",
            ],
            "TimeoutError": [
                "• A download timed out, which may indicate network throttling.",
                "• Try reducing the number of `--workers`.",
            ],
        }
        suggestions = suggestions_map.get(
            error_type, ["• Run the command with -vv for detailed logs."]
        )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    if suggestions:
        content.add_row()
        content.add_row(Text("Suggestions", style="bold yellow"))
        content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration file contents."""
    console = Console()
    if not config_data:
        console.print(
            f"[yellow]No configuration file at[/yellow] [dim]{config_path}[/dim]; "
            "built-in defaults are used."
        )
        return

    content = ""
    for key, value in config_data.items():
        if value is None:
            value = "[dim](auto-detect)[/dim]" if key == "browser" else ""
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_browser_table(
    available: Sequence[BrowserType], console: Console | None = None
):
    """Displays every supported browser with its availability on this system."""
    console = console or Console()
    table = Table(title="Supported Browsers", box=box.ROUNDED)
    table.add_column("Priority", style="dim", justify="right")
    table.add_column("Browser", style="cyan")
    table.add_column("Status")
    table.add_column("Auto-detect")

    selected = available[0] if available else None
    for rank, browser in enumerate(BROWSER_PRIORITY, 1):
        status = (
            "[green]✓ Available[/green]"
            if browser in available
            else "[dim]✗ Not found[/dim]"
        )
        pick = "[bold green]← selected[/bold green]" if browser == selected else ""
        table.add_row(str(rank), browser.display_name, status, pick)

    console.print(table)
    if selected is None:
        console.print(
            "[yellow]No browsers found. Downloads will run without cookies.[/yellow]"
        )


def print_summary_panel(
    stats: DownloadStats, duration_s: float, progress_stats: dict | None = None
):
    """Displays the final summary of the download session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    label = "✓ Would download:" if stats.dry_run else "✓ Downloaded:"
    stats_table.add_row(label, f"[bold green]{stats.files_downloaded}[/bold green]")

    if stats.files_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.files_failed}[/bold red]")

    stats_table.add_row("", "")

    if not stats.dry_run:
        stats_table.add_row(
            "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
        )
        avg_speed = stats.total_size_downloaded / duration_s if duration_s > 0 else 0
        stats_table.add_row(
            "Avg. Speed:", f"[magenta]{format_size(int(avg_speed))}/s[/magenta]"
        )

    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if progress_stats and progress_stats.get("peak_concurrent"):
        stats_table.add_row(
            "Peak Concurrent:",
            f"[green]{progress_stats['peak_concurrent']}[/green]",
        )

    if stats.failures:
        stats_table.add_row("", "")
        for url, reason in stats.failures.items():
            stats_table.add_row(
                "[red]✗[/red]", f"[dim]{escape(url)}[/dim]\n  {escape(reason)}"
            )

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    elif stats.files_failed:
        title = "⚠ [bold]Finished With Errors[/bold]"
        border_color = "red"
    else:
        title = "📥 [bold]Download Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
