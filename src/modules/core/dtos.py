"""Shared pydantic bases for catalog entities and API projections.

Field names are snake_case in Python and camelCase on the wire and in
MongoDB documents (``customer_id`` <-> ``customerId``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Largest integer a BSON document can hold (signed int64).
MAX_STORED_INT = 2**63 - 1


class CamelModel(BaseModel):
    """Base model accepting either field names or camelCase aliases.

    Floats must be finite: ``inf``/``nan`` cannot be rendered as JSON.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False
    )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, ``None`` fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Entity(CamelModel):
    """Mutable catalog record with server-assigned timestamps."""

    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def clone(self):
        """Deep copy, so no caller can alias stored state."""
        return self.model_copy(deep=True)


class SummaryModel(CamelModel):
    """Immutable listing projection."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        frozen=True,
    )
