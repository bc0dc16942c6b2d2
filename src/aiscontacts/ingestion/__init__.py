"""Ingestion layer.

Adapters that turn already-decoded AIS position reports into
:class:`~aiscontacts.models.snapshot.ShipSnapshot` values.
"""

from aiscontacts.ingestion.report import snapshot_from_report

__all__ = ["snapshot_from_report"]
