"""Interactive authentication against the Anytype desktop app.

Flow
----
1. ``auth.display_code`` asks the app to show a 4-digit code and
   returns a ``challenge_id``.
2. The user types the code into a questionary prompt.
3. ``auth.token`` exchanges ``challenge_id`` + code for an app key and
   session token, which are saved to the config file.

All display-related logic lives here; the HTTP calls go through the
:class:`~anytype_cli.core.protocols.Backend` collaborator.
"""

from __future__ import annotations

import logging
from typing import Any

from anytype_cli.cli import exit_codes
from anytype_cli.cli.console import console
from anytype_cli.config import Config, save_config
from anytype_cli.core.protocols import Backend
from anytype_cli.exceptions import AuthenticationFailedError, BackendError, EnvironmentError

logger = logging.getLogger(__name__)

APP_NAME: str = "anytype-cli"
AUTH_TIMEOUT: float = 120.0


def _import_questionary() -> Any:
    """Import questionary lazily for interactive input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def prompt_verification_code() -> str:
    """Ask the user for the code shown in the Anytype app.

    Raises
    ------
    AuthenticationFailedError
        If the prompt is cancelled or left empty.
    """
    questionary = _import_questionary()
    code: str | None = questionary.text(
        "Enter verification code:",
        validate=lambda text: bool(text.strip()) or "The code must not be empty.",
    ).ask()  # Returns None on Ctrl+C / Esc

    if code is None or not code.strip():
        raise AuthenticationFailedError(
            "Authentication canceled.",
            hint="Run 'anytype-cli auth' again and enter the code from the app.",
        )
    return code.strip()


def authenticate(backend: Backend, config: Config) -> Config:
    """Run the challenge/code exchange and return the updated config.

    Raises
    ------
    AuthenticationFailedError
        If the app does not issue a challenge or rejects the code.
    """
    console.print("Starting authentication with Anytype...")
    try:
        challenge = backend.invoke(
            "auth.display_code",
            params={"app_name": APP_NAME},
            timeout=AUTH_TIMEOUT,
        )
    except BackendError as exc:
        raise AuthenticationFailedError(
            f"Failed to initiate authentication: {exc}",
            hint=exc.hint or "Make sure the Anytype app is running.",
        ) from exc

    challenge_id = challenge.get("challenge_id") if isinstance(challenge, dict) else None
    if not challenge_id:
        raise AuthenticationFailedError("Anytype did not return an authentication challenge.")

    console.print(
        "\nPlease check your Anytype app and enter the displayed verification code.\n"
        "If no code appears, make sure Anytype is running and try again.",
    )
    code = prompt_verification_code()

    try:
        tokens = backend.invoke(
            "auth.token",
            params={"challenge_id": challenge_id, "code": code},
            timeout=AUTH_TIMEOUT,
        )
    except BackendError as exc:
        raise AuthenticationFailedError(f"Authentication failed: {exc}") from exc

    if not isinstance(tokens, dict):
        tokens = {}
    app_key = tokens.get("app_key") or tokens.get("api_key") or ""
    if not app_key:
        raise AuthenticationFailedError("Anytype did not return an app key.")

    # Newer API versions issue a single key; it doubles as the session token.
    session_token = tokens.get("session_token") or app_key
    logger.debug("received credentials for %s", config.base_url)
    return config.with_credentials(app_key, session_token)


def run_auth(backend: Backend, config: Config, *, force: bool = False) -> int:
    """Entry point for ``anytype-cli auth``."""
    if config.is_authenticated and not force:
        console.print("You are already authenticated.")
        console.print("To force re-authentication, use the --force flag.")
        return exit_codes.SUCCESS

    updated = authenticate(backend, config)
    save_config(updated)
    console.print("[bold green]Authentication successful.[/bold green] Credentials saved.")
    return exit_codes.SUCCESS
