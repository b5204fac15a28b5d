"""Single source of truth for the package version."""

from __future__ import annotations

__version__: str = "0.2.0"

API_VERSION: str = "2025-05-20"
"""Anytype local API version sent with every request."""
