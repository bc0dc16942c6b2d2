"""AIS ship snapshot model."""

from __future__ import annotations

import math
from datetime import UTC, datetime

from aiscontacts._constants import KNOTS_TO_MPS
from aiscontacts.models._base import AisBaseModel


class ShipSnapshot(AisBaseModel):
    """One position report for one vessel at one instant.

    Instances are immutable. Unit conversions are exposed as properties
    computed from the stored fields on every access; nothing derived is
    stored. Geometry is not range-checked: out-of-range or NaN values are
    kept as given.

    Parameters
    ----------
    mmsi : int
        Maritime Mobile Service Identity, the vessel's timeline key.
    sog : float
        Speed over ground in knots.
    cog : float
        Course over ground in radians.
    heading : float
        True heading in radians.
    lat_rads : float
        Latitude in radians.
    lon_rads : float
        Longitude in radians.
    timestamp_ms : int
        Report time, epoch milliseconds.
    label : str
        Display label; not required to be unique.
    """

    mmsi: int
    sog: float
    cog: float
    heading: float
    lat_rads: float
    lon_rads: float
    timestamp_ms: int
    label: str = ""

    @property
    def sog_mps(self) -> float:
        """Speed over ground in meters per second."""
        return self.sog * KNOTS_TO_MPS

    @property
    def lat_degs(self) -> float:
        return math.degrees(self.lat_rads)

    @property
    def lon_degs(self) -> float:
        return math.degrees(self.lon_rads)

    @property
    def cog_degs(self) -> float:
        return math.degrees(self.cog)

    @property
    def heading_degs(self) -> float:
        return math.degrees(self.heading)

    @property
    def timestamp(self) -> datetime:
        """Report time as a UTC datetime.

        ``timestamp_ms`` itself is unrestricted, so this accessor raises
        ``OverflowError``, ``ValueError`` or ``OSError`` for instants outside
        the range :class:`datetime` can represent. Every other operation
        works on ``timestamp_ms`` directly and is unaffected.
        """
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=UTC)
