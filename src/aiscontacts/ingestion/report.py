"""Decoded AIS position report → ShipSnapshot.

Decoders commonly emit position reports with degrees for angles and a mix
of key spellings. This module maps such a mapping onto the radian-based
:class:`ShipSnapshot`. It does not decode raw NMEA sentences.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from aiscontacts._constants import COG_NOT_AVAILABLE, HEADING_NOT_AVAILABLE, SOG_NOT_AVAILABLE
from aiscontacts.exceptions import ReportDecodeError
from aiscontacts.ingestion.normalize import epoch_to_ms, first_present, millis, safe_float, safe_int, safe_str
from aiscontacts.models.snapshot import ShipSnapshot

_MMSI_KEYS = ("mmsi", "userid", "user_id", "MMSI")
_LAT_KEYS = ("lat", "latitude", "LAT")
_LON_KEYS = ("lon", "lng", "longitude", "LON")
_SOG_KEYS = ("sog", "speed", "SOG")
_COG_KEYS = ("cog", "course", "COG")
_HEADING_KEYS = ("heading", "true_heading", "Heading")
_TIMESTAMP_MS_KEY = "timestamp_ms"
_TIMESTAMP_KEYS = ("timestamp", "time")
_LABEL_KEYS = ("label", "shipname", "name", "VesselName")


def _require(report: Mapping[str, Any], keys: tuple[str, ...], field: str) -> Any:
    value = first_present(report, keys)
    if value is None:
        raise ReportDecodeError(f"position report is missing {field!r}", field=field)
    return value


def snapshot_from_report(report: Mapping[str, Any]) -> ShipSnapshot:
    """Build a snapshot from a decoded position report.

    Angles are read in degrees and stored in radians. AIS "not available"
    values are mapped as follows: SOG 102.3 becomes 0, COG 360 becomes 0,
    heading 511 (or missing) falls back to COG. A missing label falls back
    to the MMSI as text.

    ``timestamp_ms`` is always read as epoch milliseconds. ``timestamp`` and
    ``time`` may be seconds or milliseconds; values below 10^12 are taken as
    seconds.

    Raises
    ------
    ReportDecodeError
        If MMSI, latitude, longitude or timestamp is missing or unparseable.
    """
    mmsi = safe_int(_require(report, _MMSI_KEYS, "mmsi"))
    lat = safe_float(_require(report, _LAT_KEYS, "lat"))
    lon = safe_float(_require(report, _LON_KEYS, "lon"))
    if report.get(_TIMESTAMP_MS_KEY) is not None:
        timestamp_ms = millis(report[_TIMESTAMP_MS_KEY])
    else:
        timestamp_ms = epoch_to_ms(_require(report, _TIMESTAMP_KEYS, "timestamp"))
    if mmsi is None:
        raise ReportDecodeError("mmsi is not numeric", field="mmsi")
    if lat is None or lon is None:
        raise ReportDecodeError("position is not numeric", field="lat" if lat is None else "lon")
    if timestamp_ms is None:
        raise ReportDecodeError("timestamp is not numeric", field="timestamp")

    sog = safe_float(first_present(report, _SOG_KEYS))
    if sog is None or sog >= SOG_NOT_AVAILABLE:
        sog = 0.0

    cog = safe_float(first_present(report, _COG_KEYS))
    if cog is None or cog >= COG_NOT_AVAILABLE:
        cog = 0.0

    heading = safe_float(first_present(report, _HEADING_KEYS))
    if heading is None or heading == HEADING_NOT_AVAILABLE:
        heading = cog

    label = safe_str(first_present(report, _LABEL_KEYS)) or str(mmsi)

    return ShipSnapshot(
        mmsi=mmsi,
        sog=sog,
        cog=math.radians(cog),
        heading=math.radians(heading),
        lat_rads=math.radians(lat),
        lon_rads=math.radians(lon),
        timestamp_ms=timestamp_ms,
        label=label,
    )
