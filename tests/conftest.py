"""Shared pytest fixtures and configuration for the anytype-cli test suite.

Guidelines
----------
* No internet access in any test.
* HTTP is mocked at the ``requests.Session`` boundary; everything above
  it talks to a ``MagicMock`` backend.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state (config files live in ``tmp_path``,
  ``ANYTYPE_*`` variables are cleared).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from anytype_cli.config import Config
from anytype_cli.core.models import NamedEntity


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("ANYTYPE_BASE_URL", "ANYTYPE_APP_KEY", "ANYTYPE_SESSION_TOKEN"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo ``configure_logging`` so one test's handler never leaks."""
    yield
    package_logger = logging.getLogger("anytype_cli")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """A config file holding valid credentials."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "base_url": "http://localhost:31009",
                "app_key": "key-123",
                "session_token": "session-456",
            },
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def config(config_file: Path) -> Config:
    return Config(
        base_url="http://localhost:31009",
        app_key="key-123",
        session_token="session-456",
        path=config_file,
    )


@pytest.fixture()
def spaces() -> list[NamedEntity]:
    return [
        NamedEntity(id="sp-work", name="Work"),
        NamedEntity(id="sp-alpha", name="Project Alpha"),
        NamedEntity(id="sp-beta", name="Project Beta"),
        NamedEntity(id="sp-home", name="Personal"),
    ]


@pytest.fixture()
def backend(spaces: list[NamedEntity]) -> MagicMock:
    """A Backend double whose space listing is *spaces*."""
    fake = MagicMock()
    fake.list_named_entities.return_value = spaces
    fake.invoke.return_value = {"data": []}
    return fake
