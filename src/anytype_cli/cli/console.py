"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two streams, never mixed:

* **stderr** — status lines, errors, hints, and log records (Rich).
* **stdout** — command results only, so JSON/YAML output stays
  machine-readable.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from anytype_cli.exceptions import EnvironmentError

LOG_FORMAT: str = "%(name)s: %(message)s"


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)

	def print_labeled(self, label: str, text: str, *, style: str) -> None:
		"""Print a styled *label* followed by literal *text*.

		*text* may carry user or server data, so it is escaped before
		Rich parses the line; the plain fallback prints it unchanged.
		"""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(label, text, file=sys.stderr)
			return
		from rich.markup import escape

		rich_console.print(f"[{style}]{escape(label)}[/] {escape(text)}")


console = _ConsoleProxy()


def write_result(text: str) -> None:
	"""Write command output to stdout, ending with exactly one newline."""
	if not text:
		return
	sys.stdout.write(text if text.endswith("\n") else text + "\n")
	sys.stdout.flush()


def configure_logging(verbose: bool = False) -> None:
	"""Route ``anytype_cli`` log records to stderr.

	``--verbose`` lowers the threshold to DEBUG; otherwise only warnings
	and errors are shown.  Uses Rich's handler when Rich is installed.
	"""
	level = logging.DEBUG if verbose else logging.WARNING
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError:
		handler: logging.Handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter("%(levelname)s " + LOG_FORMAT))
	else:
		handler = RichHandler(
			console=get_rich_console(),
			show_time=False,
			show_path=False,
			markup=False,
		)
		handler.setFormatter(logging.Formatter(LOG_FORMAT))

	package_logger = logging.getLogger("anytype_cli")
	for existing in list(package_logger.handlers):
		package_logger.removeHandler(existing)
	package_logger.addHandler(handler)
	package_logger.setLevel(level)
	package_logger.propagate = False
