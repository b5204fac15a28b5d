"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Anytype local API.  Every raw
third-party exception must be caught here and re-raised as a
:class:`~anytype_cli.exceptions.AnytypeCliError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from anytype_cli.infra.http_backend import OPERATIONS, AnytypeHttpBackend, Endpoint

__all__: list[str] = [
    "OPERATIONS",
    "AnytypeHttpBackend",
    "Endpoint",
]
