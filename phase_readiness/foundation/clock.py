"""Wall-clock utilities for the observability layer.

The readiness engine never reads the wall clock; only the history store
stamps records with it.  This module is the single source of "now" so
tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)
