"""Configuration loading and persistence.

The configuration is an explicit, immutable value created once at
process start and threaded into the dispatcher and backend.  Nothing
in the package reads it from ambient global state.

Precedence (highest first)
--------------------------
1. ``--base-url`` command-line flag (base URL only).
2. ``ANYTYPE_BASE_URL`` / ``ANYTYPE_APP_KEY`` / ``ANYTYPE_SESSION_TOKEN``.
3. ``~/.anytype-cli/config.yaml`` (or the ``--config`` path).
4. Built-in defaults.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from anytype_cli.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL: str = "http://localhost:31009"
"""Default Anytype local API URL."""

CONFIG_DIR_NAME: str = ".anytype-cli"
CONFIG_FILE_NAME: str = "config.yaml"
ENV_PREFIX: str = "ANYTYPE_"

_KEYS: tuple[str, ...] = ("base_url", "app_key", "session_token")


def default_config_path() -> Path:
    """Return ``~/.anytype-cli/config.yaml``."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


@dataclass(frozen=True, slots=True)
class Config:
    """CLI configuration."""

    base_url: str = DEFAULT_BASE_URL
    app_key: str = ""
    session_token: str = ""
    path: Path | None = None
    """File the configuration was loaded from and is saved back to."""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.app_key) and bool(self.session_token)

    def with_credentials(self, app_key: str, session_token: str) -> Config:
        return replace(self, app_key=app_key, session_token=session_token)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def _read_file(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"Invalid YAML in config file {path}: {exc}",
            hint="Fix or delete the file and run 'anytype-cli auth' again.",
        ) from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, not {type(data).__name__}.",
        )
    return data


def _write_file(path: Path, values: Mapping[str, str]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(dict(values), handle, default_flow_style=False, sort_keys=False)
        path.chmod(0o600)
    except OSError as exc:
        raise ConfigError(f"Cannot write config file {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_config(
    path: Path | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    base_url: str | None = None,
) -> Config:
    """Load the configuration, creating a default file when none exists.

    Parameters
    ----------
    path:
        Config file location.  Defaults to :func:`default_config_path`.
    environ:
        Environment mapping.  Defaults to :data:`os.environ`; accepting it
        enables deterministic testing without monkeypatching.
    base_url:
        Command-line override for the API base URL.

    Raises
    ------
    ConfigError
        If the file cannot be read, parsed, or created.
    """
    config_path = Path(path).expanduser() if path is not None else default_config_path()
    env = os.environ if environ is None else environ

    if config_path.exists():
        values = _read_file(config_path)
    else:
        logger.debug("creating default config at %s", config_path)
        _write_file(config_path, {"base_url": DEFAULT_BASE_URL})
        values = {}

    merged: dict[str, str] = {"base_url": DEFAULT_BASE_URL}
    for key in _KEYS:
        if values.get(key):
            merged[key] = str(values[key])
        env_value = env.get(ENV_PREFIX + key.upper())
        if env_value:
            merged[key] = env_value
    if base_url:
        merged["base_url"] = base_url

    return Config(
        base_url=merged["base_url"].rstrip("/"),
        app_key=merged.get("app_key", ""),
        session_token=merged.get("session_token", ""),
        path=config_path,
    )


def save_config(config: Config) -> None:
    """Persist the base URL and credentials of *config* to its file."""
    target = config.path if config.path is not None else default_config_path()
    _write_file(
        target,
        {
            "base_url": config.base_url,
            "app_key": config.app_key,
            "session_token": config.session_token,
        },
    )
