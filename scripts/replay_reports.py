#!/usr/bin/env python3
"""Replay decoded AIS position reports through a ContactManager.

Reads a JSON file holding a list of decoded position reports (degrees,
knots, epoch seconds or milliseconds), feeds them to a fresh manager and
prints the fleet at a given time plus dead-reckoned predictions.

Usage
-----
::

    python scripts/replay_reports.py reports.json --at 1700000000000 --offset 60000

Options::

    --at MS              Query time in epoch ms (default: newest report)
    --offset MS          Prediction offset in ms (repeatable, default: 60000)
    --mmsi N             Only show predictions for this vessel
    --export FILE        Write the exported store as JSON to FILE
    --json               Output as machine-readable JSON
    -v / --verbose       Enable DEBUG logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from aiscontacts import (  # noqa: E402
    ContactManager,
    ContactNotFoundError,
    ContactsConfig,
    ReportDecodeError,
    ShipSnapshot,
)

_logger = logging.getLogger("replay_reports")

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _row(snapshot: ShipSnapshot) -> dict[str, Any]:
    return {
        "mmsi": snapshot.mmsi,
        "label": snapshot.label,
        "timestamp_ms": snapshot.timestamp_ms,
        "lat": round(snapshot.lat_degs, 6),
        "lon": round(snapshot.lon_degs, 6),
        "sog": snapshot.sog,
        "cog": round(snapshot.cog_degs, 1),
    }


def _format_row(row: dict[str, Any]) -> str:
    return (
        f"  {row['mmsi']:>10}  {row['label']:<20.20}  t={row['timestamp_ms']}"
        f"  lat={row['lat']:.6f}  lon={row['lon']:.6f}  sog={row['sog']:.1f}  cog={row['cog']:.1f}"
    )


def _load_reports(path: Path) -> list[dict[str, Any]]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("reports", [])
    if not isinstance(payload, list):
        raise SystemExit(f"{path}: expected a JSON list of reports")
    return [item for item in payload if isinstance(item, dict)]


# ── main ─────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("reports", type=Path, help="JSON file with decoded position reports")
    parser.add_argument("--at", type=int, default=None, help="Query time in epoch ms")
    parser.add_argument("--offset", type=int, action="append", default=None, help="Prediction offset in ms")
    parser.add_argument("--mmsi", type=int, default=None, help="Only predict this vessel")
    parser.add_argument("--export", type=Path, default=None, help="Write exported store JSON here")
    parser.add_argument("--json", action="store_true", help="Machine-readable output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    offsets: list[int] = args.offset or [60_000]
    reports = _load_reports(args.reports)

    manager = ContactManager(ContactsConfig.from_env(log_reports=args.verbose))
    skipped = 0
    for report in reports:
        try:
            manager.report_decoded(report)
        except ReportDecodeError as exc:
            skipped += 1
            _logger.warning("Skipping report: %s", exc)
    _logger.info("Loaded %d reports (%d skipped) for %d vessels", len(reports) - skipped, skipped, len(manager.store))

    at = args.at
    if at is None:
        newest = [manager.store.latest(mmsi).timestamp_ms for mmsi in manager.vessel_ids()]
        at = max(newest, default=0)

    fleet = [_row(s) for s in manager.fleet_at(at)]

    predictions: dict[str, list[dict[str, Any]]] = {}
    mmsis = [args.mmsi] if args.mmsi is not None else sorted(manager.vessel_ids())
    for mmsi in mmsis:
        try:
            predictions[str(mmsi)] = [_row(s) for s in manager.predicted_positions(mmsi, *offsets)]
        except ContactNotFoundError as exc:
            _logger.warning("%s", exc)

    if args.export is not None:
        exported = {
            str(mmsi): [s.model_dump(by_alias=True) for s in history]
            for mmsi, history in manager.export_snapshots().items()
        }
        args.export.write_text(json.dumps(exported, indent=2), encoding="utf-8")
        _logger.info("Exported store to %s", args.export)

    if args.json:
        print(json.dumps({"at": at, "fleet": fleet, "predictions": predictions}, indent=2))
        return 0

    print(_section(f"Fleet at {at}"))
    for row in fleet:
        print(_format_row(row))
    for mmsi, rows in predictions.items():
        print(_section(f"Predictions for {mmsi} at offsets {offsets}"))
        for row in rows:
            print(_format_row(row))
    return 0


if __name__ == "__main__":
    sys.exit(main())
