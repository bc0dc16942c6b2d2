"""Custom exception hierarchy for aiscontacts."""

from __future__ import annotations


class AisContactsError(Exception):
    """Base exception for all aiscontacts errors."""


class AisConfigError(AisContactsError):
    """Invalid configuration value."""


class ContactNotFoundError(AisContactsError, LookupError):
    """No recorded snapshot satisfies the query.

    Raised when the vessel is unknown or, for time-bounded lookups, when
    every recorded snapshot is strictly newer than the requested time.
    Fleet-wide queries never raise this; they omit the vessel instead.
    """

    def __init__(
        self,
        message: str,
        *,
        mmsi: int,
        timestamp_ms: int | None = None,
    ) -> None:
        self.mmsi = mmsi
        self.timestamp_ms = timestamp_ms
        super().__init__(message)


class ReportDecodeError(AisContactsError, ValueError):
    """A decoded position report is missing a required field."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)
