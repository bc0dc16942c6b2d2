"""Contact manager configuration for aiscontacts."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from aiscontacts._constants import EARTH_RADIUS_KM
from aiscontacts.exceptions import AisConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise AisConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ContactsConfig:
    """Contact manager configuration.

    Parameters
    ----------
    earth_radius_km : float
        Spherical Earth radius used by dead-reckoning projection.
        Defaults to the mean radius, 6371 km.
    log_reports : bool
        Emit a DEBUG log line for every inserted position report.
        Off by default since AIS feeds can be chatty.
    """

    earth_radius_km: float = EARTH_RADIUS_KM
    log_reports: bool = False

    def __post_init__(self) -> None:
        if not self.earth_radius_km > 0:
            raise AisConfigError(f"earth_radius_km must be positive, got {self.earth_radius_km}")

    @classmethod
    def from_env(cls, **overrides: Any) -> ContactsConfig:
        """Create configuration from environment variables.

        Reads ``AIS_EARTH_RADIUS_KM`` and ``AIS_LOG_REPORTS``. Explicit
        keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ContactsConfig
            Populated configuration.

        Raises
        ------
        AisConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        radius_env = env.get("AIS_EARTH_RADIUS_KM")
        if radius_env is not None and "earth_radius_km" not in overrides:
            config_kwargs["earth_radius_km"] = _env_float("AIS_EARTH_RADIUS_KM", radius_env)

        if "log_reports" not in overrides:
            config_kwargs["log_reports"] = _env_bool(env.get("AIS_LOG_REPORTS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
