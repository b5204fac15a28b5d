"""CLI application entry point and command routing for anytype-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~anytype_cli.exceptions.AnytypeCliError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — every remote command is an entry of
  :data:`~anytype_cli.cli.commands.COMMANDS` and runs through
  :class:`~anytype_cli.core.dispatcher.CommandDispatcher`.
* Command output goes to stdout; status, errors, and logs go to stderr.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from anytype_cli.cli import commands, exit_codes
from anytype_cli.cli.console import configure_logging, console, write_result
from anytype_cli.core.dispatcher import DEFAULT_TIMEOUT, CommandSpec, OptionSpec, PositionalSpec
from anytype_cli.core.formatting import FORMAT_TABLE, OUTPUT_FORMATS
from anytype_cli.exceptions import AnytypeCliError, NotAuthenticatedError
from anytype_cli.version import API_VERSION, __version__

logger = logging.getLogger(__name__)

BUILTIN_COMMANDS: frozenset[str] = frozenset({"auth", "version", "doctor"})

_SPEC_ATTR = "_command_spec"


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _add_positional(parser: argparse.ArgumentParser, positional: PositionalSpec) -> None:
    if positional.optional:
        parser.add_argument(
            f"--{positional.name.replace('_', '-')}",
            dest=positional.name,
            default=None,
            help=positional.help,
        )
    elif positional.variadic:
        parser.add_argument(positional.name, nargs="+", help=positional.help)
    else:
        parser.add_argument(positional.name, help=positional.help)


def _add_option(parser: argparse.ArgumentParser, option: OptionSpec) -> None:
    kwargs: dict[str, Any] = {
        "dest": option.dest,
        "default": option.default,
        "help": option.help,
    }
    if option.required:
        kwargs["required"] = True
    if option.choices:
        kwargs["choices"] = option.choices
    if option.multiple:
        kwargs["type"] = _split_csv
        kwargs["default"] = option.default if option.default is not None else []
    parser.add_argument(option.flag, **kwargs)


def _add_command(
    subparsers: argparse._SubParsersAction,
    spec: CommandSpec,
) -> None:
    command_parser = subparsers.add_parser(spec.name, help=spec.help, description=spec.help)
    for positional in spec.positionals:
        _add_positional(command_parser, positional)
    for option in spec.options:
        _add_option(command_parser, option)
    command_parser.set_defaults(**{_SPEC_ATTR: spec})


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Remote commands come from :data:`commands.COMMANDS`; each group
    (``spaces``, ``objects``, ...) becomes a subcommand with its own
    nested subcommands.  ``auth``, ``version`` and ``doctor`` are
    built in.
    """
    parser = argparse.ArgumentParser(
        prog="anytype-cli",
        description="Command-line client for the Anytype local API.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--config", default=None, help="config file (default: ~/.anytype-cli/config.yaml)")
    parser.add_argument("--base-url", dest="base_url", default=None, help="Anytype API base URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument(
        "-o",
        "--output",
        choices=OUTPUT_FORMATS,
        default=FORMAT_TABLE,
        help="output format (default: table)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"seconds to wait for the API (default: {DEFAULT_TIMEOUT:g})",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    auth_parser = subparsers.add_parser("auth", help="Authenticate with the Anytype app")
    auth_parser.add_argument("--force", action="store_true", help="re-authenticate even if credentials exist")
    subparsers.add_parser("version", help="Show version information")
    subparsers.add_parser("doctor", help="Run environment diagnostics")

    for group, specs in commands.groups().items():
        if group is None:
            for spec in specs:
                _add_command(subparsers, spec)
            continue
        group_parser = subparsers.add_parser(group, help=f"Manage {group}")
        group_subparsers = group_parser.add_subparsers(
            dest="subcommand",
            metavar="<subcommand>",
        )
        group_subparsers.required = True
        for spec in specs:
            _add_command(group_subparsers, spec)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_version() -> int:
    write_result(f"anytype-cli {__version__}\nAnytype API version: {API_VERSION}")
    return exit_codes.SUCCESS


def _handle_doctor(args: argparse.Namespace) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from anytype_cli.cli.doctor import run_doctor

    return run_doctor(args.config, args.base_url)


def _handle_auth(args: argparse.Namespace) -> int:
    from anytype_cli.cli.auth import run_auth
    from anytype_cli.config import load_config
    from anytype_cli.infra.http_backend import AnytypeHttpBackend

    config = load_config(args.config, base_url=args.base_url)
    return run_auth(AnytypeHttpBackend(config), config, force=args.force)


def _handle_command(spec: CommandSpec, args: argparse.Namespace) -> int:
    """Run one table command through the dispatcher and print its output."""
    from anytype_cli.config import load_config
    from anytype_cli.core.dispatcher import CommandDispatcher
    from anytype_cli.infra.http_backend import AnytypeHttpBackend

    config = load_config(args.config, base_url=args.base_url)
    if not config.is_authenticated:
        raise NotAuthenticatedError()

    arguments = {p.name: getattr(args, p.name, None) for p in spec.positionals}
    params = {o.dest: getattr(args, o.dest, None) for o in spec.options}

    dispatcher = CommandDispatcher(
        AnytypeHttpBackend(config),
        output_format=args.output,
        timeout=args.timeout,
        resolve_timeout=args.timeout,
    )
    write_result(dispatcher.dispatch(spec, arguments, params))
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the anytype-cli CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    configure_logging(args.verbose)
    logger.debug("anytype-cli %s, command %r", __version__, args.command)

    if args.command == "version":
        return _handle_version()
    if args.command == "doctor":
        return _handle_doctor(args)
    if args.command == "auth":
        return _handle_auth(args)

    return _handle_command(getattr(args, _SPEC_ATTR), args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except AnytypeCliError as exc:
        console.print_labeled("Error:", str(exc), style="bold red")
        if exc.hint:
            console.print_labeled("Hint:", exc.hint, style="yellow")
        sys.exit(exit_codes.exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print_labeled(
            "Unexpected error.",
            f"Please report this issue.\n  {type(exc).__name__}: {exc}",
            style="bold red",
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
