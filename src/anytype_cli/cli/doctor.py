"""``anytype-cli doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment, the configuration, and the local
Anytype API are ready for use.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys
from collections.abc import Callable
from importlib import metadata

from anytype_cli.cli import exit_codes
from anytype_cli.cli.console import console
from anytype_cli.config import Config, load_config
from anytype_cli.core.table import Table
from anytype_cli.exceptions import AnytypeCliError
from anytype_cli.version import __version__

Check = tuple[str, str, str]

PING_TIMEOUT: float = 5.0

_LIBRARIES: tuple[tuple[str, str, bool], ...] = (
    # (distribution, label, required)
    ("requests", "requests", True),
    ("PyYAML", "PyYAML", True),
    ("rich", "rich", False),
    ("questionary", "questionary", False),
)


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _library_check(distribution: str, label: str, required: bool) -> Check:
    """Return (label, value, status) for one third-party library."""
    try:
        version = metadata.version(distribution)
    except metadata.PackageNotFoundError:
        status = "[red]FAIL[/red]" if required else "[yellow]WARN[/yellow]"
        return label, "NOT INSTALLED", status
    return label, version, "[green]OK[/green]"


def _cli_version_check() -> Check:
    """Return (label, value, status) for the anytype-cli version row."""
    return "anytype-cli", __version__, "[green]OK[/green]"


def _config_check(config: Config | None, error: AnytypeCliError | None) -> Check:
    if config is None:
        return "Config", str(error) if error else "not loaded", "[red]FAIL[/red]"
    return "Config", str(config.path), "[green]OK[/green]"


def _auth_check(config: Config | None) -> Check:
    if config is not None and config.is_authenticated:
        return "Credentials", "present", "[green]OK[/green]"
    return "Credentials", "missing (run 'anytype-cli auth')", "[yellow]WARN[/yellow]"


def _api_check(config: Config | None, backend_factory: Callable[[Config], object]) -> Check:
    """Return (label, value, status) for a live ``spaces.list`` probe."""
    if config is None:
        return "API", "skipped", "[yellow]WARN[/yellow]"
    if not config.is_authenticated:
        return "API", f"{config.base_url} (not probed)", "[yellow]WARN[/yellow]"
    try:
        backend = backend_factory(config)
        backend.invoke("spaces.list", timeout=PING_TIMEOUT)  # type: ignore[attr-defined]
    except AnytypeCliError as exc:
        return "API", f"{config.base_url}: {exc}", "[red]FAIL[/red]"
    return "API", config.base_url, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    """Render doctor output without Rich."""
    table = Table(["COMPONENT", "VALUE", "STATUS"]).set_column_width(1, 48)
    table.set_column_truncate(1, True)
    for label, value, status in checks:
        table.add_row([label, value, _status_plain(status)])
    print("\nanytype-cli doctor", file=sys.stderr)
    print(table.render(), file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def collect_checks(
    config_path: str | None = None,
    base_url: str | None = None,
    *,
    backend_factory: Callable[[Config], object] | None = None,
) -> list[Check]:
    """Run every diagnostic and return ``(label, value, status)`` rows."""
    if backend_factory is None:
        from anytype_cli.infra.http_backend import AnytypeHttpBackend

        backend_factory = AnytypeHttpBackend

    config: Config | None = None
    config_error: AnytypeCliError | None = None
    try:
        config = load_config(config_path, base_url=base_url)
    except AnytypeCliError as exc:
        config_error = exc

    checks = [_cli_version_check(), _python_version_check()]
    checks.extend(_library_check(*library) for library in _LIBRARIES)
    checks.extend(
        [
            _config_check(config, config_error),
            _auth_check(config),
            _api_check(config, backend_factory),
        ],
    )
    return checks


def run_doctor(
    config_path: str | None = None,
    base_url: str | None = None,
    *,
    backend_factory: Callable[[Config], object] | None = None,
) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = collect_checks(config_path, base_url, backend_factory=backend_factory)
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.markup import escape
        from rich.table import Table as RichTable
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = RichTable(
            title="anytype-cli doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)
        for label, value, status in checks:
            table.add_row(label, escape(value), status)
        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]" if rich_available else "Some checks failed.")
        return exit_codes.GENERAL_ERROR

    console.print("[bold green]All checks passed.[/bold green]" if rich_available else "All checks passed.")
    return exit_codes.SUCCESS
