"""Allow ``python -m anytype_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m anytype_cli`` behaves identically to the
``anytype-cli`` console script.
"""

from __future__ import annotations

from anytype_cli.cli.app import cli

if __name__ == "__main__":
    cli()
