"""Tests for the interactive authentication flow (cli/auth.py).

questionary is mocked at the lazy-import seam; the backend is a
``MagicMock``.  No network, no terminal interaction.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from anytype_cli.cli import exit_codes
from anytype_cli.cli.auth import APP_NAME, authenticate, prompt_verification_code, run_auth
from anytype_cli.config import Config
from anytype_cli.exceptions import AuthenticationFailedError, TransportError


def _questionary(answer: str | None) -> MagicMock:
    module = MagicMock()
    module.text.return_value.ask.return_value = answer
    return module


def _backend(*replies: object) -> MagicMock:
    backend = MagicMock()
    backend.invoke.side_effect = list(replies)
    return backend


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------

class TestPrompt:
    @patch("anytype_cli.cli.auth._import_questionary")
    def test_returns_stripped_code(self, mock_import: MagicMock) -> None:
        mock_import.return_value = _questionary(" 1234 ")
        assert prompt_verification_code() == "1234"

    @pytest.mark.parametrize("answer", [None, "", "   "])
    @patch("anytype_cli.cli.auth._import_questionary")
    def test_cancel_or_empty(self, mock_import: MagicMock, answer: str | None) -> None:
        mock_import.return_value = _questionary(answer)
        with pytest.raises(AuthenticationFailedError, match="canceled"):
            prompt_verification_code()


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------

class TestAuthenticate:
    @patch("anytype_cli.cli.auth._import_questionary")
    def test_success(self, mock_import: MagicMock) -> None:
        mock_import.return_value = _questionary("1234")
        backend = _backend({"challenge_id": "ch-1"}, {"app_key": "k1", "session_token": "s1"})

        updated = authenticate(backend, Config())

        assert (updated.app_key, updated.session_token) == ("k1", "s1")
        first, second = backend.invoke.call_args_list
        assert first.args == ("auth.display_code",)
        assert first.kwargs["params"] == {"app_name": APP_NAME}
        assert second.args == ("auth.token",)
        assert second.kwargs["params"] == {"challenge_id": "ch-1", "code": "1234"}

    @patch("anytype_cli.cli.auth._import_questionary")
    def test_single_key_doubles_as_session_token(self, mock_import: MagicMock) -> None:
        mock_import.return_value = _questionary("1234")
        backend = _backend({"challenge_id": "ch-1"}, {"api_key": "k1"})
        updated = authenticate(backend, Config())
        assert updated.app_key == updated.session_token == "k1"

    def test_challenge_failure(self) -> None:
        backend = MagicMock()
        backend.invoke.side_effect = TransportError("down", hint="start Anytype")
        with pytest.raises(AuthenticationFailedError, match="initiate") as exc_info:
            authenticate(backend, Config())
        assert exc_info.value.hint == "start Anytype"

    def test_missing_challenge(self) -> None:
        with pytest.raises(AuthenticationFailedError, match="challenge"):
            authenticate(_backend({}), Config())

    @patch("anytype_cli.cli.auth._import_questionary")
    def test_rejected_code(self, mock_import: MagicMock) -> None:
        mock_import.return_value = _questionary("0000")
        backend = _backend({"challenge_id": "ch-1"}, TransportError("bad code"))
        with pytest.raises(AuthenticationFailedError, match="bad code"):
            authenticate(backend, Config())

    @patch("anytype_cli.cli.auth._import_questionary")
    def test_missing_key(self, mock_import: MagicMock) -> None:
        mock_import.return_value = _questionary("1234")
        backend = _backend({"challenge_id": "ch-1"}, {})
        with pytest.raises(AuthenticationFailedError, match="app key"):
            authenticate(backend, Config())


# ---------------------------------------------------------------------------
# run_auth
# ---------------------------------------------------------------------------

class TestRunAuth:
    def test_already_authenticated(self, config: Config) -> None:
        backend = MagicMock()
        assert run_auth(backend, config) == exit_codes.SUCCESS
        backend.invoke.assert_not_called()

    @patch("anytype_cli.cli.auth._import_questionary")
    def test_saves_credentials(self, mock_import: MagicMock, tmp_path: Path) -> None:
        mock_import.return_value = _questionary("1234")
        path = tmp_path / "config.yaml"
        backend = _backend({"challenge_id": "ch-1"}, {"app_key": "k1", "session_token": "s1"})

        assert run_auth(backend, Config(path=path)) == exit_codes.SUCCESS

        saved = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert saved["app_key"] == "k1"
        assert saved["session_token"] == "s1"

    @patch("anytype_cli.cli.auth._import_questionary")
    def test_force_reauthenticates(self, mock_import: MagicMock, config: Config) -> None:
        mock_import.return_value = _questionary("1234")
        backend = _backend({"challenge_id": "ch-1"}, {"app_key": "new", "session_token": "new-s"})
        run_auth(backend, config, force=True)
        assert backend.invoke.call_count == 2
        assert yaml.safe_load(config.path.read_text(encoding="utf-8"))["app_key"] == "new"  # type: ignore[union-attr]
