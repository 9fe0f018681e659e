"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses matching the Wit entities resources
- Low-level HTTP client with a pluggable transport and error handling
"""

from wit_cli.core.client import (
    APIClient,
    APIError,
    CLIError,
    DeserializationError,
    Response,
    SerializationError,
    Transport,
    TransportError,
    UnexpectedStatusError,
    UrllibTransport,
    ValidationError,
)
from wit_cli.core.types import Entities, Entity, EntityValue, parse_entities

__all__ = [
    "APIClient",
    "APIError",
    "CLIError",
    "DeserializationError",
    "Entities",
    "Entity",
    "EntityValue",
    "Response",
    "SerializationError",
    "Transport",
    "TransportError",
    "UnexpectedStatusError",
    "UrllibTransport",
    "ValidationError",
    "parse_entities",
]
