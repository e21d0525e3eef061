"""Shared type aliases for loadprobe."""

from __future__ import annotations

# Occurrence count keyed by HTTP status code.
StatusCounts = dict[int, int]

# Occurrence count keyed by exception type name.
ErrorCounts = dict[str, int]
