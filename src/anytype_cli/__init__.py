"""anytype-cli — command-line client for the Anytype local API.

Human-friendly identifiers are resolved to canonical IDs and results are
rendered as aligned tables, JSON, or YAML.
"""

from anytype_cli.version import __version__

__all__: list[str] = ["__version__"]
