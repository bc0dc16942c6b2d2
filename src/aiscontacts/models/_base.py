"""Base model for aiscontacts value types.

Every model inherits from :class:`AisBaseModel` which provides:

* ``frozen=True`` so instances can be shared freely between threads
  and handed to callers without copying.
* ``alias_generator=to_camel`` so camelCase keys written by a
  persistence collaborator map back to snake_case fields.
* ``populate_by_name=True`` so both spellings are accepted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AisBaseModel(BaseModel):
    """Base for immutable aiscontacts models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
