"""Core / service layer — pure decision logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from anytype_cli.core.dispatcher import (
    CommandDispatcher,
    CommandSpec,
    OptionSpec,
    PositionalSpec,
)
from anytype_cli.core.models import Ambiguous, NamedEntity, Resolved, Unresolved
from anytype_cli.core.protocols import Backend
from anytype_cli.core.resolver import describe_ambiguity, resolve
from anytype_cli.core.table import Table, TableSpec, render

__all__: list[str] = [
    "Ambiguous",
    "Backend",
    "CommandDispatcher",
    "CommandSpec",
    "NamedEntity",
    "OptionSpec",
    "PositionalSpec",
    "Resolved",
    "Table",
    "TableSpec",
    "Unresolved",
    "describe_ambiguity",
    "render",
    "resolve",
]
