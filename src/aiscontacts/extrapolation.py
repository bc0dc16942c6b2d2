"""Great-circle dead reckoning.

Projects a snapshot forward (or backward) in time assuming the vessel holds
its course over ground and speed over ground, on a spherical Earth.
"""

from __future__ import annotations

import math

from aiscontacts._constants import EARTH_RADIUS_KM
from aiscontacts.models.snapshot import ShipSnapshot


def _clamp_unit(value: float) -> float:
    # NaN falls through unchanged.
    if value > 1.0:
        return 1.0
    if value < -1.0:
        return -1.0
    return value


def travelled_distance_km(snapshot: ShipSnapshot, offset_ms: int) -> float:
    """Straight-line distance covered in *offset_ms* at the snapshot's speed.

    The offset is truncated toward zero to whole seconds, so offsets under
    one second cover no distance. Negative offsets give negative distances.
    """
    seconds = int(offset_ms / 1000)
    return snapshot.sog_mps * seconds / 1000


def destination(
    lat: float,
    lon: float,
    bearing: float,
    distance_km: float,
    *,
    earth_radius_km: float = EARTH_RADIUS_KM,
) -> tuple[float, float]:
    """Destination ``(lat, lon)`` in radians after *distance_km* along *bearing*.

    Uses the spherical forward formula::

        lat2 = asin(sin(lat)·cos(d/R) + cos(lat)·sin(d/R)·cos(bearing))
        lon2 = lon + atan2(sin(bearing)·sin(d/R)·cos(lat), cos(d/R) − sin(lat)·sin(lat2))

    Never raises. Infinite angles yield NaN; NaN inputs propagate.
    """
    if distance_km == 0.0:
        return lat, lon

    angular = distance_km / earth_radius_km
    if math.isinf(lat) or math.isinf(bearing) or math.isinf(angular):
        return math.nan, math.nan

    lat2 = math.asin(
        _clamp_unit(math.sin(lat) * math.cos(angular) + math.cos(lat) * math.sin(angular) * math.cos(bearing))
    )
    lon2 = lon + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat),
        math.cos(angular) - math.sin(lat) * math.sin(lat2),
    )
    return lat2, lon2


def project(
    snapshot: ShipSnapshot,
    offset_ms: int,
    *,
    earth_radius_km: float = EARTH_RADIUS_KM,
) -> ShipSnapshot:
    """Return the snapshot's predicted state *offset_ms* later.

    Course over ground, not heading, drives the projection. Every field
    except position and timestamp is carried over unchanged, and the new
    timestamp is ``snapshot.timestamp_ms + offset_ms``. Zero displacement
    (no speed or no offset) keeps the position exactly. Longitude is not
    wrapped into [-π, π].
    """
    lat2, lon2 = destination(
        snapshot.lat_rads,
        snapshot.lon_rads,
        snapshot.cog,
        travelled_distance_km(snapshot, offset_ms),
        earth_radius_km=earth_radius_km,
    )
    return snapshot.model_copy(
        update={
            "lat_rads": lat2,
            "lon_rads": lon2,
            "timestamp_ms": snapshot.timestamp_ms + int(offset_ms),
        }
    )
