"""Structured serializers and small value formatters.

JSON and YAML output bypass the table renderer entirely and serialize
the raw API result.  YAML is produced with PyYAML's ``safe_dump`` so no
Python-specific tags ever reach the terminal.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import yaml

FORMAT_TABLE: str = "table"
FORMAT_JSON: str = "json"
FORMAT_YAML: str = "yaml"

OUTPUT_FORMATS: tuple[str, ...] = (FORMAT_TABLE, FORMAT_JSON, FORMAT_YAML)


def to_json(data: Any) -> str:
    """Serialize *data* as indented JSON, keeping non-ASCII text readable."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def to_yaml(data: Any) -> str:
    """Serialize *data* as block-style YAML in insertion order."""
    return yaml.safe_dump(
        data,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )


def format_time(millis: int | float | None) -> str:
    """Render an API timestamp (milliseconds since the epoch) as RFC 1123.

    ``0`` and ``None`` mean "never" and render as ``"N/A"``.
    """
    if not millis:
        return "N/A"
    moment = datetime.fromtimestamp(int(millis) // 1000, tz=timezone.utc)
    return moment.strftime("%a, %d %b %Y %H:%M:%S UTC")


def format_bool(value: object) -> str:
    """Render a flag the way the detail views show it."""
    return "true" if value else "false"
