"""aiscontacts - Thread-safe AIS contact history with dead-reckoning prediction."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyaiscontacts")
except PackageNotFoundError:
    __version__ = "0+local"
from aiscontacts.config import ContactsConfig
from aiscontacts.exceptions import (
    AisConfigError,
    AisContactsError,
    ContactNotFoundError,
    ReportDecodeError,
)
from aiscontacts.extrapolation import project, travelled_distance_km
from aiscontacts.ingestion import snapshot_from_report
from aiscontacts.manager import ContactManager
from aiscontacts.models import ShipSnapshot
from aiscontacts.state import ContactStore

__all__ = [
    "__version__",
    "AisConfigError",
    "AisContactsError",
    "ContactManager",
    "ContactNotFoundError",
    "ContactStore",
    "ContactsConfig",
    "ReportDecodeError",
    "ShipSnapshot",
    "project",
    "snapshot_from_report",
    "travelled_distance_km",
]
