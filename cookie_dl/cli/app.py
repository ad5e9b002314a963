"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import sys
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from cookie_dl import __version__
from cookie_dl.browser import BrowserSource, BrowserType, CookieManager
from cookie_dl.browser.manager import SourceFactory
from cookie_dl.cookies import BrowserCookieStore, cookie_matches_url
from cookie_dl.core.download_manager import DownloadManager
from cookie_dl.exceptions import (
    BrowserError,
    CookieDlError,
    NoBrowsersAvailableError,
)
from cookie_dl.models.config import DownloadConfig
from cookie_dl.storage.config_manager import ConfigManager
from cookie_dl.utils.structured_logger import create_session_logger

from .formatters import (
    format_error_with_suggestions,
    print_browser_table,
    print_config,
    print_summary_panel,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("cookie_dl")

app = typer.Typer(
    name="cookie-dl",
    help=(
        "Download files over HTTP using the cookies of your installed browser."
        " Use 'cookie-dl <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "cookie-dl"


def get_config_file() -> Path:
    return get_config_dir() / "config.ini"


def resolve_cookie_manager(
    config: DownloadConfig, source_factory: SourceFactory = BrowserSource
) -> CookieManager | None:
    """
    Picks the browser for a download session from the loaded configuration.

    Returns None when cookies are disabled, or when no browser was requested
    and none is installed.

    Raises:
        BrowserError: If a requested browser cannot be bound.
    """
    if not config.use_cookies:
        log.info("Cookies disabled; requests are sent without cookies.")
        return None

    if config.browser is None:
        try:
            return CookieManager.with_fallback(None, source_factory)
        except NoBrowsersAvailableError:
            log.warning(
                "[yellow]⚠ No supported browser found; downloading without"
                " cookies.[/yellow]"
            )
            return None

    if config.browser_fallback:
        return CookieManager.with_fallback(config.browser, source_factory)
    return CookieManager.explicit(config.browser, source_factory)


def _selection_mode(config: DownloadConfig) -> str:
    if not config.use_cookies:
        return "disabled"
    if config.browser is None:
        return "auto"
    return "fallback" if config.browser_fallback else "explicit"


def _fail(error: Exception) -> typer.Exit:
    console.print(format_error_with_suggestions(error))
    return typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Cookie-aware downloader CLI"""
    if version:
        console.print(f"[bold]cookie-dl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "DEBUG" if verbose >= 2 else "INFO"
    logging.getLogger("cookie_dl").setLevel(log_level)

    if show_config:
        config_file = get_config_file()
        try:
            config_data = ConfigManager(config_file).get_config_as_dict()
        except CookieDlError as e:
            raise _fail(e) from e
        print_config(config_file, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    browser: str | None = typer.Option(
        None, "--browser", "-b", help="Browser to read cookies from by default."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a default configuration file."""
    config_file = get_config_file()
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {}
    if browser is not None:
        try:
            settings["browser"] = BrowserType.parse(browser)
        except BrowserError as e:
            raise _fail(e) from e

    try:
        ConfigManager(config_file).save_new_config(settings)
    except CookieDlError as e:
        raise _fail(e) from e
    console.print(f"[bold green]✓ Configuration saved to '{config_file}'[/bold green]")


@app.command()
def browsers():
    """List supported browsers and which ones are installed."""
    available = CookieManager.detect_available_browsers()
    print_browser_table(available, console)


@app.command()
def cookies(
    url: str = typer.Argument(..., help="The URL to inspect."),
    browser: str | None = typer.Option(
        None,
        "--browser",
        "-b",
        envvar="COOKIE_DL_BROWSER",
        help="Browser to read cookies from (chrome, firefox, safari, edge).",
    ),
):
    """Show which browser cookies would be sent to a URL (names only)."""
    try:
        config = ConfigManager(get_config_file()).load_config({"browser": browser})
        manager = resolve_cookie_manager(config)
    except CookieDlError as e:
        raise _fail(e) from e

    if manager is None:
        console.print(
            f"[yellow]⚠ No cookies would be sent to {escape(url)}: cookies are"
            " disabled or no supported browser is installed.[/yellow]"
        )
        raise typer.Exit()

    store = BrowserCookieStore(manager)
    domain = store.registrable_domain(url)
    if domain is None:
        console.print(f"[red]✗ Could not determine a domain for {escape(url)}[/red]")
        raise typer.Exit(code=1)

    try:
        candidates = manager.fetch_cookies_for_domain(domain)
    except BrowserError as e:
        raise _fail(e) from e

    table = Table(title=f"Cookies for {escape(domain)} from {manager.browser_name}")
    table.add_column("Name", style="cyan")
    table.add_column("Domain")
    table.add_column("Path")
    table.add_column("Sent", justify="center")
    for cookie in candidates:
        sent = cookie_matches_url(cookie, url)
        table.add_row(
            escape(cookie.name),
            escape(cookie.domain),
            escape(cookie.path),
            "[green]✓[/green]" if sent else "[dim]✗[/dim]",
        )
    console.print(table)


def _read_urls_from_stdin() -> list[str]:
    """Reads URLs from stdin, one per line."""
    if sys.stdin.isatty():
        console.print(
            "[yellow]⚠️  No input detected on stdin. Please pipe URLs or redirect"
            " a file.[/yellow]"
        )
        raise typer.Exit(code=1)

    urls = [
        line.strip()
        for line in sys.stdin
        if line.strip() and not line.lstrip().startswith("#")
    ]
    if not urls:
        console.print("[yellow]⚠️  No valid URLs found in stdin.[/yellow]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Read {len(urls)} URLs from stdin.[/green]")
    return urls


@app.command(name="download")
def download_command(
    urls: list[str] | None = typer.Argument(  # noqa: B008
        None, help="One or more URLs, or paths to files containing URLs."
    ),
    browser: str | None = typer.Option(
        None,
        "--browser",
        "-b",
        envvar="COOKIE_DL_BROWSER",
        help="Browser to read cookies from (chrome, firefox, safari, edge).",
    ),
    fallback: bool | None = typer.Option(
        None,
        "--fallback/--no-fallback",
        help="Fall back to another installed browser if the chosen one is missing.",
    ),
    use_cookies: bool | None = typer.Option(
        None, "--cookies/--no-cookies", help="Send browser cookies with requests."
    ),
    workers: int | None = typer.Option(
        None, "-w", "--workers", help="Number of simultaneous downloads."
    ),
    output_dir: str | None = typer.Option(
        None, "-o", "--output-dir", help="Directory to save files into."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be downloaded without doing it."
    ),
    stdin: bool = typer.Option(
        False, "--stdin", help="Read URLs from standard input, one URL per line."
    ),
    log_json: Path | None = typer.Option(  # noqa: B008
        None, "--log-json", help="Write a JSON-lines event log into this directory."
    ),
):
    """Download files, attaching the cookies of a local browser."""
    if stdin:
        if urls:
            console.print(
                "[yellow]⚠️  Both URLs and --stdin provided. Using --stdin only."
                "[/yellow]"
            )
        urls = _read_urls_from_stdin()
    elif not urls:
        console.print(
            "[red]✗ No URLs provided.[/red] "
            "Use: [cyan]cookie-dl download <URL>[/cyan] or [cyan]--stdin[/cyan]"
        )
        raise typer.Exit(code=1)

    cli_options = {
        "source_urls": urls,
        "browser": browser,
        "browser_fallback": fallback,
        "use_cookies": use_cookies,
        "max_workers": workers,
        "output_dir": output_dir,
        "dry_run": dry_run,
    }

    try:
        config = ConfigManager(get_config_file()).load_config(cli_options)
        cookie_manager = resolve_cookie_manager(config)
    except CookieDlError as e:
        raise _fail(e) from e

    session_logger = create_session_logger(log_json)
    session_logger.browser_selected(
        cookie_manager.browser_name if cookie_manager else None,
        mode=_selection_mode(config),
    )

    store = BrowserCookieStore(cookie_manager) if cookie_manager is not None else None

    async def _download_async():
        async with ProgressManager(
            console=console, dry_run=config.dry_run
        ) as progress_manager:
            manager = DownloadManager(
                config, store, progress_manager, session_logger=session_logger
            )
            if config.dry_run:
                console.print("[bold cyan]🔍 Starting dry run session...[/bold cyan]")
            else:
                console.print("[bold cyan]📥 Starting download session...[/bold cyan]")

            start_time = time.monotonic()
            stats = await manager.execute_downloads()
            duration = time.monotonic() - start_time
            progress_stats = progress_manager.get_statistics()
        return stats, duration, progress_stats

    try:
        stats, duration, progress_stats = asyncio.run(_download_async())
    finally:
        session_logger.close()

    print_summary_panel(stats, duration, progress_stats)
    if stats.exit_code:
        raise typer.Exit(code=stats.exit_code)
