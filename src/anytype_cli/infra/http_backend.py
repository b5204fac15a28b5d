"""``requests``-backed implementation of :class:`~anytype_cli.core.protocols.Backend`.

This module is the **only** place in the codebase that talks HTTP.  All
``requests`` exceptions and non-2xx replies are caught here and re-raised
as typed :class:`~anytype_cli.exceptions.BackendError` subclasses —
nothing raw escapes the infrastructure boundary.

Operations are data, not code: :data:`OPERATIONS` maps each operation
name to an :class:`Endpoint`, and the identifiers passed to
:meth:`AnytypeHttpBackend.invoke` fill the path placeholders in order.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from anytype_cli.config import Config
from anytype_cli.core.models import NamedEntity
from anytype_cli.exceptions import (
    AuthError,
    BackendError,
    EnvironmentError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from anytype_cli.version import API_VERSION

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 30.0


@dataclass(frozen=True, slots=True)
class Endpoint:
    """HTTP shape of one remote operation."""

    method: str
    path: str
    """Path template with one ``{}`` placeholder per identifier."""

    query: tuple[str, ...] = ()
    """Parameter names sent in the query string."""

    body: tuple[str, ...] = ()
    """Parameter names sent in the JSON body."""


OPERATIONS: dict[str, Endpoint] = {
    "auth.display_code": Endpoint("POST", "/v1/auth/display_code", query=("app_name",)),
    "auth.token": Endpoint("POST", "/v1/auth/token", query=("challenge_id", "code")),
    "spaces.list": Endpoint("GET", "/v1/spaces"),
    "spaces.get": Endpoint("GET", "/v1/spaces/{}"),
    "spaces.create": Endpoint("POST", "/v1/spaces", body=("name", "description", "icon")),
    "objects.list": Endpoint("GET", "/v1/spaces/{}/objects"),
    "objects.get": Endpoint("GET", "/v1/spaces/{}/objects/{}"),
    "objects.create": Endpoint(
        "POST",
        "/v1/spaces/{}/objects",
        body=("type_key", "name", "description", "body", "icon", "template_id"),
    ),
    "objects.delete": Endpoint("DELETE", "/v1/spaces/{}/objects/{}"),
    "objects.export": Endpoint("GET", "/v1/spaces/{}/objects/{}/export/markdown"),
    "types.list": Endpoint("GET", "/v1/spaces/{}/types"),
    "types.get": Endpoint("GET", "/v1/spaces/{}/types/{}"),
    "templates.list": Endpoint("GET", "/v1/spaces/{}/types/{}/templates"),
    "templates.get": Endpoint("GET", "/v1/spaces/{}/types/{}/templates/{}"),
    "members.list": Endpoint("GET", "/v1/spaces/{}/members"),
    "members.get": Endpoint("GET", "/v1/spaces/{}/members/{}"),
    "lists.views": Endpoint("GET", "/v1/spaces/{}/lists/{}/views"),
    "lists.objects": Endpoint("GET", "/v1/spaces/{}/lists/{}/views/{}/objects"),
    "lists.add": Endpoint("POST", "/v1/spaces/{}/lists/{}/objects", body=("objects",)),
    "lists.remove": Endpoint("DELETE", "/v1/spaces/{}/lists/{}/objects/{}"),
    "search.global": Endpoint("POST", "/v1/search", body=("query", "types", "sort")),
    "search.space": Endpoint("POST", "/v1/spaces/{}/search", body=("query", "types", "sort")),
}

_LISTINGS: dict[str, str] = {
    "spaces": "spaces.list",
    "types": "types.list",
}
"""Resolution scope → operation returning that scope's entities."""


def _import_requests() -> Any:
    """Import requests lazily so ``--help`` works without it."""
    try:
        import requests
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "requests is not installed. Install with: pip install requests",
        ) from exc
    return requests


class AnytypeHttpBackend:
    """Concrete :class:`Backend` for the Anytype local REST API.

    Usage::

        backend = AnytypeHttpBackend(load_config())
        spaces = backend.list_named_entities("spaces")
        space = backend.invoke("spaces.get", spaces[0].id)

    This class satisfies the :class:`~anytype_cli.core.protocols.Backend`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(self, config: Config, *, session: Any | None = None) -> None:
        self._requests: Any = _import_requests()
        self._config: Config = config
        self._session: Any = session if session is not None else self._requests.Session()
        self._session.headers.update(self._build_headers(config))

    @staticmethod
    def _build_headers(config: Config) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Anytype-Version": API_VERSION,
        }
        if config.app_key:
            headers["Authorization"] = f"Bearer {config.app_key}"
        return headers

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def list_named_entities(
        self,
        scope: str,
        *parents: str,
        timeout: float | None = None,
    ) -> list[NamedEntity]:
        """Fetch a fresh ``(id, name)`` snapshot for *scope*.

        Raises
        ------
        ValidationError
            When *scope* is not a known resolution scope.
        """
        operation = _LISTINGS.get(scope)
        if operation is None:
            raise ValidationError(f"Cannot resolve identifiers in scope '{scope}'.")

        payload = self.invoke(operation, *parents, timeout=timeout)
        entries = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(entries, list):
            raise TransportError(f"Unexpected listing shape for {scope}.")
        return [
            NamedEntity.from_payload(entry)
            for entry in entries
            if isinstance(entry, dict) and entry.get("id")
        ]

    def invoke(
        self,
        operation: str,
        *identifiers: str,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Perform *operation* and return the decoded JSON reply.

        Raises
        ------
        ValidationError
            For unknown operations, a wrong identifier count, or a 4xx
            validation reply.
        TransportError
            When the API is unreachable or replies with garbage.
        AuthError
            On 401/403.
        NotFoundError
            On 404.
        """
        endpoint = OPERATIONS.get(operation)
        if endpoint is None:
            raise ValidationError(f"Unknown operation '{operation}'.")

        url = self._config.base_url + self._build_path(endpoint, identifiers)
        values = dict(params or {})
        query = {k: values[k] for k in endpoint.query if values.get(k) is not None}
        body = {k: values[k] for k in endpoint.body if values.get(k) not in (None, "", [])}

        logger.debug("%s %s", endpoint.method, url)
        try:
            response = self._session.request(
                endpoint.method,
                url,
                params=query or None,
                json=body if endpoint.body else None,
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
        except self._requests.exceptions.Timeout as exc:
            raise TransportError(
                f"Request to {url} timed out.",
                hint="Raise --timeout or check that Anytype is responsive.",
            ) from exc
        except self._requests.exceptions.ConnectionError as exc:
            raise TransportError(
                f"Cannot connect to {self._config.base_url}.",
                hint="Make sure the Anytype app is running, or pass --base-url.",
            ) from exc
        except self._requests.exceptions.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        return self._decode(response, operation)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_path(endpoint: Endpoint, identifiers: tuple[str, ...]) -> str:
        expected = endpoint.path.count("{}")
        if len(identifiers) != expected:
            raise ValidationError(
                f"{endpoint.path} needs {expected} identifier(s), got {len(identifiers)}.",
            )
        return endpoint.path.format(*(quote(str(i), safe="") for i in identifiers))

    @classmethod
    def _decode(cls, response: Any, operation: str) -> Any:
        status = response.status_code
        if status >= 400:
            cls._raise_mapped(status, cls._error_message(response), operation)
        if status == 204 or not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON in response to {operation}.",
                status_code=status,
            ) from exc

    @staticmethod
    def _error_message(response: Any) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text.strip() or response.reason or ""
        if isinstance(payload, dict):
            for key in ("message", "error"):
                value = payload.get(key)
                if isinstance(value, dict):
                    value = value.get("message")
                if value:
                    return str(value)
        return ""

    @staticmethod
    def _raise_mapped(status: int, message: str, operation: str) -> None:
        """Translate an HTTP error status into a domain exception.

        Always raises.
        """
        detail = f"{operation} failed ({status})"
        if message:
            detail = f"{detail}: {message}"

        error_class: type[BackendError]
        hint: str | None = None
        if status in (401, 403):
            error_class = AuthError
            hint = "Run 'anytype-cli auth --force' to refresh your credentials."
        elif status == 404:
            error_class = NotFoundError
        elif status in (400, 409, 422):
            error_class = ValidationError
        else:
            error_class = TransportError
        raise error_class(detail, hint=hint, status_code=status)
