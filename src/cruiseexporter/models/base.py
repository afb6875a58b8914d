"""Base models shared by the upstream document mirrors.

Example:
    >>> from cruiseexporter.models.base import UpstreamModel
    >>> class Ship(UpstreamModel):
    ...     name: str
    >>> Ship.model_validate({"name": "Wonder", "__typename": "Ship"}).name
    'Wonder'
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """Read-only mirror of a fragment of the upstream document.

    Field names are snake_case in Python and camelCase on the wire.
    Fields the exporter does not consume are ignored rather than rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )
