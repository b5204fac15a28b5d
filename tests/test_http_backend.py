"""Tests for the ``requests``-backed Backend (infra/http_backend.py).

The HTTP session is a ``MagicMock`` — no network.

Coverage:
* Headers carry the API version and bearer token.
* Operation table → method, URL, query and body.
* Status codes map onto the typed error hierarchy.
* ``requests`` exceptions never escape.
* Listing snapshots become ``NamedEntity`` lists.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from anytype_cli.config import Config
from anytype_cli.core.models import NamedEntity
from anytype_cli.exceptions import (
    AuthError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from anytype_cli.infra.http_backend import OPERATIONS, AnytypeHttpBackend
from anytype_cli.version import API_VERSION


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _response(status: int = 200, payload: Any = None, *, text: str | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.reason = "Reason"
    if text is not None:
        response.text = text
        response.content = text.encode()
        response.json.side_effect = ValueError("not json")
    elif payload is None:
        response.text = ""
        response.content = b""
        response.json.side_effect = ValueError("empty")
    else:
        response.text = json.dumps(payload)
        response.content = response.text.encode()
        response.json.return_value = payload
    return response


def _backend(response: MagicMock | None = None) -> tuple[AnytypeHttpBackend, MagicMock]:
    session = MagicMock()
    session.headers = {}
    session.request.return_value = response if response is not None else _response(200, {})
    config = Config(base_url="http://localhost:31009", app_key="key-123", session_token="s")
    return AnytypeHttpBackend(config, session=session), session


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TestRequests:
    def test_headers(self) -> None:
        _, session = _backend()
        assert session.headers["Anytype-Version"] == API_VERSION
        assert session.headers["Authorization"] == "Bearer key-123"

    def test_no_authorization_without_key(self) -> None:
        session = MagicMock()
        session.headers = {}
        AnytypeHttpBackend(Config(), session=session)
        assert "Authorization" not in session.headers

    def test_get_with_identifiers(self) -> None:
        backend, session = _backend(_response(200, {"object": {"id": "o1"}}))
        result = backend.invoke("objects.get", "sp 1", "o1", timeout=5)
        assert result == {"object": {"id": "o1"}}
        session.request.assert_called_once_with(
            "GET",
            "http://localhost:31009/v1/spaces/sp%201/objects/o1",
            params=None,
            json=None,
            timeout=5,
        )

    def test_body_drops_empty_values(self) -> None:
        backend, session = _backend(_response(200, {"space": {}}))
        backend.invoke(
            "spaces.create",
            params={"name": "New", "description": "", "icon": None, "unknown": "x"},
        )
        _, kwargs = session.request.call_args
        assert kwargs["json"] == {"name": "New"}

    def test_query_parameters(self) -> None:
        backend, session = _backend(_response(200, {"challenge_id": "c"}))
        backend.invoke("auth.display_code", params={"app_name": "anytype-cli"})
        args, kwargs = session.request.call_args
        assert args == ("POST", "http://localhost:31009/v1/auth/display_code")
        assert kwargs["params"] == {"app_name": "anytype-cli"}

    def test_default_timeout(self) -> None:
        backend, session = _backend()
        backend.invoke("spaces.list")
        assert session.request.call_args.kwargs["timeout"] == 30.0

    def test_unknown_operation(self) -> None:
        backend, session = _backend()
        with pytest.raises(ValidationError, match="Unknown operation"):
            backend.invoke("spaces.explode")
        session.request.assert_not_called()

    def test_wrong_identifier_count(self) -> None:
        backend, _ = _backend()
        with pytest.raises(ValidationError, match="identifier"):
            backend.invoke("objects.get", "only-space")

    def test_every_operation_has_a_versioned_path(self) -> None:
        assert all(endpoint.path.startswith("/v1/") for endpoint in OPERATIONS.values())


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class TestResponses:
    def test_no_content(self) -> None:
        backend, _ = _backend(_response(204))
        assert backend.invoke("lists.remove", "s", "l", "o") == {}

    def test_invalid_json(self) -> None:
        backend, _ = _backend(_response(200, text="<html>"))
        with pytest.raises(TransportError, match="Invalid JSON"):
            backend.invoke("spaces.list")

    @pytest.mark.parametrize(
        ("status", "error_class"),
        [
            (400, ValidationError),
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (409, ValidationError),
            (422, ValidationError),
            (500, TransportError),
            (503, TransportError),
        ],
    )
    def test_status_mapping(self, status: int, error_class: type[Exception]) -> None:
        backend, _ = _backend(_response(status, {"message": "nope"}))
        with pytest.raises(error_class) as exc_info:
            backend.invoke("spaces.list")
        assert exc_info.value.status_code == status  # type: ignore[attr-defined]
        assert "nope" in str(exc_info.value)

    def test_nested_error_message(self) -> None:
        backend, _ = _backend(_response(404, {"error": {"message": "object not found"}}))
        with pytest.raises(NotFoundError, match="object not found"):
            backend.invoke("objects.get", "s", "o")

    def test_auth_error_hint(self) -> None:
        backend, _ = _backend(_response(401, {"message": "expired"}))
        with pytest.raises(AuthError) as exc_info:
            backend.invoke("spaces.list")
        assert "--force" in (exc_info.value.hint or "")

    def test_plain_text_error_body(self) -> None:
        backend, _ = _backend(_response(500, text="internal failure"))
        with pytest.raises(TransportError, match="internal failure"):
            backend.invoke("spaces.list")


# ---------------------------------------------------------------------------
# Transport failures
# ---------------------------------------------------------------------------

class TestTransport:
    @pytest.mark.parametrize(
        ("raised", "fragment"),
        [
            (requests.exceptions.Timeout("slow"), "timed out"),
            (requests.exceptions.ConnectionError("refused"), "Cannot connect"),
            (requests.exceptions.TooManyRedirects("loop"), "failed"),
        ],
    )
    def test_requests_errors_are_wrapped(self, raised: Exception, fragment: str) -> None:
        backend, session = _backend()
        session.request.side_effect = raised
        with pytest.raises(TransportError, match=fragment) as exc_info:
            backend.invoke("spaces.list")
        assert exc_info.value.__cause__ is raised


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------

class TestListNamedEntities:
    def test_spaces(self) -> None:
        payload = {"data": [{"id": "s1", "name": "Work"}, {"id": "s2"}, {"name": "no id"}]}
        backend, session = _backend(_response(200, payload))
        entities = backend.list_named_entities("spaces", timeout=3)
        assert entities == [NamedEntity("s1", "Work"), NamedEntity("s2", "")]
        assert session.request.call_args.kwargs["timeout"] == 3

    def test_types_are_scoped_by_space(self) -> None:
        backend, session = _backend(_response(200, {"data": [{"id": "t1", "name": "Page"}]}))
        assert backend.list_named_entities("types", "s1") == [NamedEntity("t1", "Page")]
        assert session.request.call_args.args[1].endswith("/v1/spaces/s1/types")

    def test_unknown_scope(self) -> None:
        backend, _ = _backend()
        with pytest.raises(ValidationError, match="scope"):
            backend.list_named_entities("members")

    def test_unexpected_shape(self) -> None:
        backend, _ = _backend(_response(200, {"data": "oops"}))
        with pytest.raises(TransportError):
            backend.list_named_entities("spaces")
