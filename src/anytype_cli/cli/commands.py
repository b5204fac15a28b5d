"""The command table: one :class:`CommandSpec` per remote operation.

The argument parser and the dispatcher both iterate this table; adding
a command means adding an entry here, nothing else.

Space arguments (and the type argument of the type commands) accept an
ID, an exact name, or a unique fragment of a name.  Other identifiers
are forwarded to the API verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from anytype_cli.cli import views
from anytype_cli.core.dispatcher import CommandSpec, OptionSpec, PositionalSpec

DEFAULT_OBJECT_TYPE: str = "page"


# ---------------------------------------------------------------------------
# Shared argument declarations
# ---------------------------------------------------------------------------

SPACE = PositionalSpec("space", "space ID or name", scope="spaces")
TYPE = PositionalSpec("type_id", "type ID or name", scope="types", parent="space")
OBJECT = PositionalSpec("object_id", "object ID")
LIST = PositionalSpec("list_id", "list (collection or set) ID")


# ---------------------------------------------------------------------------
# Parameter builders
# ---------------------------------------------------------------------------

def _with_emoji_icon(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Turn ``--icon 🚀`` into the API's icon object."""
    params = dict(raw)
    emoji = params.pop("icon", None)
    if emoji:
        params["icon"] = {"format": "emoji", "emoji": emoji}
    return params


def _search_params(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Fold ``--sort``/``--direction`` into the API's sort object."""
    params = {"query": raw.get("query") or "", "types": list(raw.get("types") or [])}
    if raw.get("sort"):
        params["sort"] = {
            "property_key": raw["sort"],
            "direction": raw.get("direction") or "desc",
        }
    return params


def _search_operation(arguments: Mapping[str, Any]) -> str:
    return "search.space" if arguments.get("space") else "search.global"


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

COMMANDS: tuple[CommandSpec, ...] = (
    # spaces
    CommandSpec(
        "spaces", "list", "List all spaces",
        operation="spaces.list",
        renderer=views.render_spaces,
    ),
    CommandSpec(
        "spaces", "get", "Get details of a specific space",
        operation="spaces.get",
        renderer=views.render_space,
        positionals=(SPACE,),
        result_key="space",
    ),
    CommandSpec(
        "spaces", "create", "Create a new space",
        operation="spaces.create",
        renderer=views.render_space_created,
        options=(
            OptionSpec("--name", "name", "name for the new space", required=True),
            OptionSpec("--description", "description", "description for the new space"),
            OptionSpec("--icon", "icon", "emoji icon for the space (e.g. '🚀')"),
        ),
        result_key="space",
        build_params=_with_emoji_icon,
    ),
    # objects
    CommandSpec(
        "objects", "list", "List objects in a space",
        operation="objects.list",
        renderer=views.render_objects,
        positionals=(SPACE,),
    ),
    CommandSpec(
        "objects", "get", "Get details of a specific object",
        operation="objects.get",
        renderer=views.render_object,
        positionals=(SPACE, OBJECT),
        result_key="object",
    ),
    CommandSpec(
        "objects", "create", "Create a new object",
        operation="objects.create",
        renderer=views.render_object_created,
        positionals=(SPACE,),
        options=(
            OptionSpec("--name", "name", "name for the new object", required=True),
            OptionSpec(
                "--type", "type_key",
                f"type key for the object (default: {DEFAULT_OBJECT_TYPE})",
                default=DEFAULT_OBJECT_TYPE,
            ),
            OptionSpec("--description", "description", "description for the new object"),
            OptionSpec("--icon", "icon", "emoji icon for the object (e.g. '📄')"),
            OptionSpec("--body", "body", "markdown body content for the object"),
            OptionSpec("--template", "template_id", "template ID to create the object from"),
        ),
        result_key="object",
        build_params=_with_emoji_icon,
    ),
    CommandSpec(
        "objects", "delete", "Delete (archive) an object",
        operation="objects.delete",
        renderer=views.render_object_deleted,
        positionals=(SPACE, OBJECT),
        result_key="object",
    ),
    CommandSpec(
        "objects", "export", "Export an object as markdown",
        operation="objects.export",
        renderer=views.render_markdown,
        positionals=(SPACE, OBJECT),
    ),
    # types
    CommandSpec(
        "types", "list", "List all object types in a space",
        operation="types.list",
        renderer=views.render_types,
        positionals=(SPACE,),
    ),
    CommandSpec(
        "types", "get", "Get details of a specific object type",
        operation="types.get",
        renderer=views.render_type,
        positionals=(SPACE, TYPE),
        result_key="type",
    ),
    CommandSpec(
        "types", "templates", "List templates for an object type",
        operation="templates.list",
        renderer=views.render_templates,
        positionals=(SPACE, TYPE),
    ),
    CommandSpec(
        "types", "template-get", "Get details of a specific template",
        operation="templates.get",
        renderer=views.render_template,
        positionals=(SPACE, TYPE, PositionalSpec("template_id", "template ID")),
        result_key="template",
    ),
    # members
    CommandSpec(
        "members", "list", "List all members in a space",
        operation="members.list",
        renderer=views.render_members,
        positionals=(SPACE,),
    ),
    CommandSpec(
        "members", "get", "Get details of a specific member",
        operation="members.get",
        renderer=views.render_member,
        positionals=(SPACE, PositionalSpec("member_id", "member ID")),
        result_key="member",
    ),
    # lists
    CommandSpec(
        "lists", "views", "List views for a list",
        operation="lists.views",
        renderer=views.render_views,
        positionals=(SPACE, LIST),
    ),
    CommandSpec(
        "lists", "objects", "List objects in a view",
        operation="lists.objects",
        renderer=views.render_view_objects,
        positionals=(SPACE, LIST, PositionalSpec("view_id", "view ID")),
    ),
    CommandSpec(
        "lists", "add", "Add objects to a list",
        operation="lists.add",
        renderer=views.render_list_added,
        positionals=(
            SPACE,
            LIST,
            PositionalSpec("object_ids", "object IDs to add", variadic=True, param="objects"),
        ),
    ),
    CommandSpec(
        "lists", "remove", "Remove an object from a list",
        operation="lists.remove",
        renderer=views.render_list_removed,
        positionals=(SPACE, LIST, OBJECT),
    ),
    # search
    CommandSpec(
        None, "search", "Search for objects",
        operation=_search_operation,
        renderer=views.render_search,
        positionals=(
            PositionalSpec(
                "space",
                "limit the search to this space (ID or name; default: all spaces)",
                scope="spaces",
                optional=True,
            ),
        ),
        options=(
            OptionSpec("--query", "query", "search query string", default=""),
            OptionSpec(
                "--types", "types",
                "filter by object types (comma-separated, e.g. 'page,note')",
                multiple=True,
            ),
            OptionSpec(
                "--sort", "sort",
                "property to sort by (created_date, last_modified_date, last_opened_date, name)",
            ),
            OptionSpec(
                "--direction", "direction", "sort direction",
                default="desc", choices=("asc", "desc"),
            ),
        ),
        build_params=_search_params,
    ),
)


def groups() -> dict[str | None, list[CommandSpec]]:
    """Group the table by command group, preserving declaration order."""
    grouped: dict[str | None, list[CommandSpec]] = {}
    for spec in COMMANDS:
        grouped.setdefault(spec.group, []).append(spec)
    return grouped


def find(path: str) -> CommandSpec:
    """Return the command registered under *path* (e.g. ``"spaces list"``)."""
    for spec in COMMANDS:
        if spec.path == path:
            return spec
    raise KeyError(path)
