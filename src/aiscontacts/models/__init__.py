"""Data models for AIS contacts."""

from aiscontacts.models._base import AisBaseModel
from aiscontacts.models.snapshot import ShipSnapshot

__all__ = [
    "AisBaseModel",
    "ShipSnapshot",
]
