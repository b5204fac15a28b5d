"""Generic command dispatcher.

Every subcommand is a :class:`CommandSpec` entry in a table built once
at startup.  The dispatcher runs the same pipeline for all of them::

    raw positionals → resolver → canonical IDs → Backend.invoke
                    → result → table renderer | JSON / YAML serializer

Guarantees
----------
* Exactly one ``invoke`` call per dispatch, bounded by ``timeout``.
* Identifier snapshots are fetched fresh for every resolution.
* No ``print()`` — the rendered text is returned to the CLI layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from anytype_cli.core.formatting import (
    FORMAT_JSON,
    FORMAT_TABLE,
    FORMAT_YAML,
    OUTPUT_FORMATS,
    to_json,
    to_yaml,
)
from anytype_cli.core.models import Ambiguous, Resolved
from anytype_cli.core.protocols import Backend
from anytype_cli.core.resolver import describe_ambiguity, resolve
from anytype_cli.exceptions import AmbiguousIdentifierError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 30.0


# ---------------------------------------------------------------------------
# Command table entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PositionalSpec:
    """One identifier argument of a command."""

    name: str
    help: str = ""
    scope: str | None = None
    """Entity family to resolve the value against, or ``None`` for raw IDs."""

    parent: str | None = None
    """Earlier argument whose canonical ID scopes the resolution listing."""

    variadic: bool = False
    """Consume one or more trailing values."""

    param: str | None = None
    """Route the value into ``params[param]`` instead of the identifier list."""

    optional: bool = False
    """Declared as ``--<name>``; omitted from the identifiers when absent."""


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """One ``--flag`` whose value becomes an operation parameter."""

    flag: str
    dest: str
    help: str = ""
    default: Any = None
    required: bool = False
    multiple: bool = False
    """Accept a comma-separated list."""

    choices: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class Invocation:
    """What the renderer gets to see about a finished call."""

    arguments: Mapping[str, Any]
    """Canonical positional values, keyed by positional name."""

    params: Mapping[str, Any]
    payload: Any
    """The full decoded API response (before ``result_key`` unwrapping)."""


Renderer = Callable[[Any, Invocation], str]
OperationSelector = Callable[[Mapping[str, Any]], str]
ParamsBuilder = Callable[[Mapping[str, Any]], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A single subcommand: ``[group] <name> <positionals...> [options]``."""

    group: str | None
    name: str
    help: str
    operation: Union[str, OperationSelector]
    """Operation name, or a selector called with the canonical arguments."""

    renderer: Renderer
    positionals: tuple[PositionalSpec, ...] = ()
    options: tuple[OptionSpec, ...] = ()
    result_key: str | None = None
    """Top-level key of the API response holding the interesting data."""

    build_params: ParamsBuilder | None = None
    """Reshape raw option values into the request parameters."""

    @property
    def path(self) -> str:
        return f"{self.group} {self.name}" if self.group else self.name

    def operation_for(self, arguments: Mapping[str, Any]) -> str:
        if isinstance(self.operation, str):
            return self.operation
        return self.operation(arguments)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class CommandDispatcher:
    """Run a :class:`CommandSpec` against a :class:`Backend`.

    Parameters
    ----------
    backend:
        Any object satisfying the :class:`Backend` protocol.
    output_format:
        One of :data:`~anytype_cli.core.formatting.OUTPUT_FORMATS`.
    timeout:
        Seconds allowed for the operation call.
    resolve_timeout:
        Seconds allowed for each identifier snapshot listing.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        output_format: str = FORMAT_TABLE,
        timeout: float = DEFAULT_TIMEOUT,
        resolve_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValidationError(
                f"Unknown output format: {output_format}",
                hint=f"Choose one of: {', '.join(OUTPUT_FORMATS)}",
            )
        self._backend: Backend = backend
        self._output_format: str = output_format
        self._timeout: float = timeout
        self._resolve_timeout: float = resolve_timeout

    # ------------------------------------------------------------------
    # Identifier resolution
    # ------------------------------------------------------------------

    def resolve_identifier(self, scope: str, value: str, *parents: str) -> str:
        """Resolve *value* within *scope* to a canonical ID.

        Unknown values are passed through unchanged so that IDs missing
        from the snapshot still reach the API (which may reject them).

        Raises
        ------
        AmbiguousIdentifierError
            When *value* matches several entities.
        """
        snapshot = self._backend.list_named_entities(
            scope, *parents, timeout=self._resolve_timeout,
        )
        outcome = resolve(snapshot, value)

        if isinstance(outcome, Resolved):
            if outcome.id != value:
                logger.debug("resolved %s %r to %s", scope, value, outcome.id)
            return outcome.id
        if isinstance(outcome, Ambiguous):
            raise AmbiguousIdentifierError(
                describe_ambiguity(outcome, scope.rstrip("s")),
                outcome=outcome,
            )
        logger.debug("no %s matched %r; passing it through", scope, value)
        return outcome.original_input

    def _canonical_arguments(
        self,
        spec: CommandSpec,
        arguments: Mapping[str, Any],
    ) -> dict[str, Any]:
        canonical: dict[str, Any] = {}
        for positional in spec.positionals:
            value = arguments.get(positional.name)
            if value is not None and positional.scope is not None:
                parents = (canonical[positional.parent],) if positional.parent else ()
                value = self.resolve_identifier(positional.scope, value, *parents)
            canonical[positional.name] = value
        return canonical

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(
        self,
        spec: CommandSpec,
        arguments: Mapping[str, Any],
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Resolve, invoke, and render one command.

        Parameters
        ----------
        spec:
            The command table entry.
        arguments:
            Raw positional values keyed by positional name.
        params:
            Raw option values keyed by option ``dest``.

        Returns
        -------
        str
            Text ready to be written to stdout.
        """
        canonical = self._canonical_arguments(spec, arguments)

        raw_params: dict[str, Any] = dict(params or {})
        call_params = spec.build_params(raw_params) if spec.build_params else raw_params
        identifiers: list[str] = []
        for positional in spec.positionals:
            value = canonical[positional.name]
            if value is None:
                continue
            if positional.param is not None:
                call_params[positional.param] = value
            else:
                identifiers.append(value)

        operation = spec.operation_for(canonical)
        logger.debug("invoking %s with %s", operation, identifiers)
        payload = self._backend.invoke(
            operation,
            *identifiers,
            params=call_params,
            timeout=self._timeout,
        )
        data = _unwrap(payload, spec.result_key)

        if self._output_format == FORMAT_JSON:
            return to_json(data)
        if self._output_format == FORMAT_YAML:
            return to_yaml(data)
        return spec.renderer(
            data,
            Invocation(arguments=canonical, params=call_params, payload=payload),
        )


def _unwrap(payload: Any, key: str | None) -> Any:
    """Return ``payload[key]`` when present, else *payload* unchanged."""
    if key is None or not isinstance(payload, Mapping):
        return payload
    return payload.get(key, payload)
