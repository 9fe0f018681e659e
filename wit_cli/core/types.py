"""
Core types for the Wit.ai entities API.

These dataclasses mirror the JSON resources returned by /entities.
"""

from dataclasses import dataclass, field
from typing import Any

from wit_cli.core.client import DeserializationError, SerializationError

# =============================================================================
# Entity Types
# =============================================================================


def _expect(data: Any, kind: type, what: str) -> Any:
    if not isinstance(data, kind):
        raise DeserializationError(
            f"Expected {what} to be {kind.__name__}, got {type(data).__name__}",
        )
    return data


def _get(data: dict[str, Any], key: str, default: Any) -> Any:
    # only null or absent fields take the default
    value = data.get(key)
    return default if value is None else value


def _string_list(data: Any, what: str) -> list[str]:
    items = _expect(data, list, what)
    for item in items:
        _expect(item, str, f"item of {what}")
    return list(items)


@dataclass
class EntityValue:
    """A canonical value of an entity, with its alternate expressions."""

    value: str
    expressions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EntityValue":
        """Create from API response dict."""
        _expect(data, dict, "entity value")
        return cls(
            value=_expect(_get(data, "value", ""), str, "value"),
            expressions=_string_list(_get(data, "expressions", []), "expressions"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        return {
            "value": self.value,
            "expressions": list(self.expressions),
        }


@dataclass
class Entity:
    """A named classification category known to Wit."""

    id: str
    doc: str = ""
    builtin: bool = False
    values: list[EntityValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entity":
        """Create from API response dict."""
        _expect(data, dict, "entity")
        raw_values = _expect(_get(data, "values", []), list, "values")
        return cls(
            id=_expect(_get(data, "id", ""), str, "id"),
            doc=_expect(_get(data, "doc", ""), str, "doc"),
            builtin=_expect(_get(data, "builtin", False), bool, "builtin"),
            values=[EntityValue.from_dict(v) for v in raw_values],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        for v in self.values:
            if not isinstance(v, EntityValue):
                raise SerializationError(f"Expected EntityValue in values, got {type(v).__name__}")
        return {
            "builtin": self.builtin,
            "doc": self.doc,
            "id": self.id,
            "values": [v.to_dict() for v in self.values],
        }


# =============================================================================
# Entity Listing
# =============================================================================


# GET /entities returns a bare array of entity ids
Entities = list[str]


def parse_entities(data: Any) -> Entities:
    """Parse the /entities listing into an ordered list of ids."""
    return _string_list(data, "entities")
