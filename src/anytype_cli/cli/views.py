"""Default (``--output table``) renderers for every command.

Each renderer takes the unwrapped API result plus the
:class:`~anytype_cli.core.dispatcher.Invocation` and returns text.
List results become adaptive tables; single entities become labelled
detail blocks.  ID columns are never truncated because users copy them
back into other commands.

All display-related logic lives here — no business logic, no network
access, no argument parsing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from anytype_cli.core.dispatcher import Invocation
from anytype_cli.core.formatting import format_bool, format_time
from anytype_cli.core.table import Table

NAME_WIDTH: int = 30
SHORT_WIDTH: int = 20


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def _text(value: object) -> str:
    """Render a scalar cell; ``None`` becomes the empty string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return format_bool(value)
    return str(value)


def _items(data: Any) -> list[Mapping[str, Any]]:
    """Return the entity dicts of a list result."""
    if isinstance(data, Mapping):
        data = data.get("data", [])
    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, Mapping)]


def _type_key(obj: Mapping[str, Any]) -> str:
    """Object type key, from either the flat or the nested API shape."""
    if obj.get("type_key"):
        return _text(obj["type_key"])
    nested = obj.get("type")
    if isinstance(nested, Mapping):
        return _text(nested.get("key"))
    return _text(nested)


def _icon(icon: object) -> str | None:
    """Render an icon as ``🚀`` or ``name (format)``."""
    if not isinstance(icon, Mapping):
        return None
    if icon.get("format") == "emoji" or (icon.get("emoji") and not icon.get("name")):
        return _text(icon.get("emoji"))
    return f"{_text(icon.get('name'))} ({_text(icon.get('format'))})"


def _details(title: str, pairs: Iterable[tuple[str, object]]) -> str:
    """Render ``TITLE``, an underline, then ``Label: value`` lines."""
    lines = [title, "-" * len(title)]
    lines.extend(f"{label}: {_text(value)}" for label, value in pairs)
    return "\n".join(lines) + "\n"


def _footer(noun: str, count: int, payload: Any = None) -> str:
    """Total line, plus a note when the API holds back more results."""
    lines = [f"\nTotal {noun}: {count}"]
    pagination = payload.get("pagination") if isinstance(payload, Mapping) else None
    if isinstance(pagination, Mapping) and pagination.get("has_more"):
        lines.append(
            f"Has more {noun} (Total: {_text(pagination.get('total'))}, "
            f"Retrieved: {count})",
        )
    return "\n".join(lines) + "\n"


def _listing(
    headers: Sequence[str],
    rows: Iterable[Sequence[str]],
    *,
    truncated: Mapping[int, int] | None = None,
) -> Table:
    """Build a table; *truncated* maps column index → capped width."""
    table = Table(headers)
    for column, width in (truncated or {}).items():
        table.set_column_width(column, width).set_column_truncate(column, True)
    for row in rows:
        table.add_row(list(row))
    return table


# ---------------------------------------------------------------------------
# Spaces
# ---------------------------------------------------------------------------

def render_spaces(data: Any, invocation: Invocation) -> str:
    spaces = _items(data)
    table = _listing(
        ["SPACE ID", "NAME", "DESCRIPTION"],
        (
            [_text(s.get("id")), _text(s.get("name")), _text(s.get("description"))]
            for s in spaces
        ),
        truncated={1: SHORT_WIDTH, 2: NAME_WIDTH},
    )
    return table.render() + _footer("spaces", len(spaces), invocation.payload)


def render_space(data: Any, invocation: Invocation) -> str:
    pairs: list[tuple[str, object]] = [
        ("ID", data.get("id")),
        ("Name", data.get("name")),
        ("Description", data.get("description")),
        ("Home Object ID", data.get("home_object_id") or data.get("home_id")),
        ("Archive ID", data.get("archive_id")),
        ("Profile ID", data.get("profile_id")),
        ("Created At", format_time(data.get("created_at"))),
        ("Last Opened At", format_time(data.get("last_opened_at"))),
    ]
    icon = _icon(data.get("icon"))
    if icon is not None:
        pairs.append(("Icon", icon))
    return _details("SPACE DETAILS", pairs)


def render_space_created(data: Any, invocation: Invocation) -> str:
    return "Space created successfully:\n" + "\n".join(
        [
            f"ID: {_text(data.get('id'))}",
            f"Name: {_text(data.get('name'))}",
            f"Description: {_text(data.get('description'))}",
        ],
    ) + "\n"


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------

def render_objects(data: Any, invocation: Invocation) -> str:
    objects = _items(data)
    table = _listing(
        ["OBJECT ID", "NAME", "TYPE", "LAYOUT"],
        (
            [_text(o.get("id")), _text(o.get("name")), _type_key(o), _text(o.get("layout"))]
            for o in objects
        ),
        truncated={1: NAME_WIDTH, 2: SHORT_WIDTH, 3: SHORT_WIDTH},
    )
    return table.render() + _footer("objects", len(objects), invocation.payload)


def _property_value(prop: Mapping[str, Any]) -> str:
    for key in ("text", "url", "email", "phone", "date"):
        if prop.get(key):
            return _text(prop[key])
    if prop.get("number") not in (None, 0):
        return _text(prop["number"])
    if isinstance(prop.get("select"), Mapping):
        return _text(prop["select"].get("name"))
    for key in ("multi_select", "tags"):
        values = prop.get(key)
        if isinstance(values, list) and values:
            return "[" + ", ".join(_text(v.get("name")) for v in values if isinstance(v, Mapping)) + "]"
    if "checkbox" in prop:
        return format_bool(prop["checkbox"])
    return "[complex type]"


def render_object(data: Any, invocation: Invocation) -> str:
    pairs: list[tuple[str, object]] = [
        ("ID", data.get("id")),
        ("Name", data.get("name")),
        ("Type", _type_key(data)),
    ]
    nested_type = data.get("type")
    if isinstance(nested_type, Mapping) and nested_type.get("name"):
        pairs.append(("Type Name", nested_type["name"]))
    pairs.extend(
        [
            ("Layout", data.get("layout")),
            ("Space ID", data.get("space_id")),
            ("Archived", format_bool(data.get("archived"))),
        ],
    )
    icon = _icon(data.get("icon"))
    if icon is not None:
        pairs.append(("Icon", icon))

    text = _details("OBJECT DETAILS", pairs)
    properties = [p for p in data.get("properties") or [] if isinstance(p, Mapping)]
    if properties:
        text += "\n" + _details(
            "PROPERTIES",
            ((_text(p.get("name")), _property_value(p)) for p in properties),
        )
    return text


def render_object_created(data: Any, invocation: Invocation) -> str:
    return "Object created successfully:\n" + "\n".join(
        [
            f"ID: {_text(data.get('id'))}",
            f"Name: {_text(data.get('name'))}",
            f"Type: {_type_key(data)}",
        ],
    ) + "\n"


def render_object_deleted(data: Any, invocation: Invocation) -> str:
    return (
        f"Object '{_text(data.get('name'))}' (ID: {_text(data.get('id'))}) "
        "deleted successfully.\n"
        f"Archive status: {format_bool(data.get('archived'))}\n"
    )


def render_markdown(data: Any, invocation: Invocation) -> str:
    if isinstance(data, Mapping):
        return _text(data.get("markdown"))
    return _text(data)


# ---------------------------------------------------------------------------
# Types and templates
# ---------------------------------------------------------------------------

def render_types(data: Any, invocation: Invocation) -> str:
    types = _items(data)
    table = _listing(
        ["KEY", "NAME", "LAYOUT", "DESCRIPTION"],
        (
            [
                _text(t.get("key")),
                _text(t.get("name")),
                _text(t.get("recommended_layout") or t.get("layout")),
                _text(t.get("description")),
            ]
            for t in types
        ),
    )
    return table.render() + _footer("types", len(types), invocation.payload)


def render_type(data: Any, invocation: Invocation) -> str:
    text = _details(
        "TYPE DETAILS",
        [
            ("ID", data.get("id")),
            ("Key", data.get("key")),
            ("Name", data.get("name")),
            ("Description", data.get("description")),
            ("Layout", data.get("layout")),
            ("Recommended Layout", data.get("recommended_layout")),
            ("Is Archived", format_bool(data.get("archived") or data.get("is_archived"))),
            ("Is Hidden", format_bool(data.get("is_hidden"))),
        ],
    )
    definitions = data.get("properties") or data.get("property_definitions") or []
    definitions = [d for d in definitions if isinstance(d, Mapping)]
    if definitions:
        table = _listing(
            ["KEY", "NAME", "FORMAT", "REQUIRED"],
            (
                [
                    _text(d.get("key")),
                    _text(d.get("name")),
                    _text(d.get("format")),
                    format_bool(d.get("required")),
                ]
                for d in definitions
            ),
            truncated={0: SHORT_WIDTH, 1: SHORT_WIDTH, 2: 12},
        )
        text += "\nPROPERTY DEFINITIONS\n--------------------\n" + table.render()
    return text


def render_templates(data: Any, invocation: Invocation) -> str:
    templates = _items(data)
    table = _listing(
        ["TEMPLATE ID", "NAME", "ARCHIVED"],
        (
            [_text(t.get("id")), _text(t.get("name")), format_bool(t.get("archived"))]
            for t in templates
        ),
    )
    return table.render() + _footer("templates", len(templates), invocation.payload)


def render_template(data: Any, invocation: Invocation) -> str:
    pairs: list[tuple[str, object]] = [
        ("ID", data.get("id")),
        ("Name", data.get("name")),
        ("Archived", format_bool(data.get("archived"))),
    ]
    icon = _icon(data.get("icon"))
    if icon is not None:
        pairs.append(("Icon", icon))
    return _details("TEMPLATE DETAILS", pairs)


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------

def render_members(data: Any, invocation: Invocation) -> str:
    members = _items(data)
    table = _listing(
        ["MEMBER ID", "NAME", "ROLE", "STATUS"],
        (
            [
                _text(m.get("id")),
                _text(m.get("name")),
                _text(m.get("role")),
                _text(m.get("status")),
            ]
            for m in members
        ),
    )
    return table.render() + _footer("members", len(members), invocation.payload)


def render_member(data: Any, invocation: Invocation) -> str:
    pairs: list[tuple[str, object]] = [
        ("ID", data.get("id")),
        ("Name", data.get("name")),
        ("Global Name", data.get("global_name")),
        ("Identity", data.get("identity")),
        ("Role", data.get("role")),
        ("Status", data.get("status")),
    ]
    icon = _icon(data.get("icon"))
    if icon is not None:
        pairs.append(("Icon", icon))
    return _details("MEMBER DETAILS", pairs)


# ---------------------------------------------------------------------------
# Lists and views
# ---------------------------------------------------------------------------

def render_views(data: Any, invocation: Invocation) -> str:
    views = _items(data)
    table = _listing(
        ["VIEW ID", "NAME", "LAYOUT"],
        ([_text(v.get("id")), _text(v.get("name")), _text(v.get("layout"))] for v in views),
    )
    return table.render() + _footer("views", len(views), invocation.payload)


def render_view_objects(data: Any, invocation: Invocation) -> str:
    objects = _items(data)
    table = _listing(
        ["OBJECT ID", "NAME", "TYPE"],
        ([_text(o.get("id")), _text(o.get("name")), _type_key(o)] for o in objects),
    )
    return table.render() + _footer("objects", len(objects), invocation.payload)


def render_list_added(data: Any, invocation: Invocation) -> str:
    object_ids = list(invocation.params.get("objects") or [])
    lines = [
        f"Successfully added {len(object_ids)} object(s) to list "
        f"{invocation.arguments.get('list_id')}",
    ]
    lines.extend(f"  {index}. {object_id}" for index, object_id in enumerate(object_ids, 1))
    return "\n".join(lines) + "\n"


def render_list_removed(data: Any, invocation: Invocation) -> str:
    return (
        f"Successfully removed object {invocation.arguments.get('object_id')} "
        f"from list {invocation.arguments.get('list_id')}\n"
    )


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def render_search(data: Any, invocation: Invocation) -> str:
    results = _items(data)
    table = _listing(
        ["OBJECT ID", "NAME", "TYPE", "SPACE ID"],
        (
            [_text(o.get("id")), _text(o.get("name")), _type_key(o), _text(o.get("space_id"))]
            for o in results
        ),
        truncated={1: NAME_WIDTH, 2: SHORT_WIDTH},
    )

    params = invocation.params
    lines = ["", "Search details:", f"  Query: '{_text(params.get('query'))}'"]
    if params.get("types"):
        lines.append(f"  Types: {', '.join(params['types'])}")
    sort = params.get("sort")
    if isinstance(sort, Mapping):
        lines.append(
            f"  Sorted by: {_text(sort.get('property_key'))} ({_text(sort.get('direction'))})",
        )
    space = invocation.arguments.get("space")
    if space:
        lines.append(f"  Limited to space: {space}")
    else:
        lines.append("  Searched across all spaces")

    return (
        table.render()
        + _footer("results", len(results), invocation.payload)
        + "\n".join(lines)
        + "\n"
    )
