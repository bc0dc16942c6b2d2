"""Normalization helpers.

Centralizes defensive parsing of decoded report fields.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from aiscontacts._constants import MS_THRESHOLD


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or not math.isfinite(parsed):
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def first_present(report: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Return the value of the first key in *keys* present with a non-``None`` value."""
    for key in keys:
        value = report.get(key)
        if value is not None:
            return value
    return None


def epoch_to_ms(value: Any) -> int | None:
    """Convert an epoch timestamp (seconds **or** milliseconds, or a datetime) to milliseconds.

    Naive datetimes are taken as UTC. Returns ``None`` when the value is
    absent, not numeric or not finite.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp() * 1000)
    ts = safe_float(value)
    if ts is None or not math.isfinite(ts):
        return None
    if abs(ts) < MS_THRESHOLD:
        ts *= 1000
    return int(ts)


def millis(value: Any) -> int | None:
    """Parse a value already known to be epoch milliseconds."""
    if isinstance(value, datetime):
        return epoch_to_ms(value)
    return safe_int(value)
