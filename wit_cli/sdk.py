"""
Wit SDK - High-level client with nice ergonomics.

This layer provides a clean, typed interface for the Wit entities API.
Built on top of the core APIClient.
"""

import urllib.parse

from wit_cli.core.client import DEFAULT_TIMEOUT, APIClient, Transport, ValidationError
from wit_cli.core.types import Entities, Entity, EntityValue, parse_entities


class WitClient:
    """
    High-level Wit API client with typed methods.

    Example:
        client = WitClient()

        names = client.entities.list()
        city = client.entities.get("favorite_city")
        client.entities.create_value_expression("favorite_city", "Barcelona", "Paella")

    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
    ):
        """
        Initialize the Wit client.

        Args:
            access_token: Wit access token (or WIT_ACCESS_TOKEN env var)
            base_url: API base URL (or WIT_BASE_URL env var)
            api_version: API version for the Accept header (or WIT_API_VERSION env var)
            timeout: Request timeout in seconds
            transport: Transport override, mainly for tests

        """
        self._client = APIClient(
            access_token=access_token,
            base_url=base_url,
            api_version=api_version,
            timeout=timeout,
            transport=transport,
        )

        self.entities = EntityOperations(self._client)

    @property
    def base_url(self) -> str:
        """Get the configured API base URL."""
        return self._client.base_url


def _require(name: str, value: str) -> str:
    if not value:
        raise ValidationError(f"{name} must not be empty")
    return value


# =============================================================================
# Entity Operations
# =============================================================================


class EntityOperations:
    """Operations for managing entities, their values and expressions."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self) -> Entities:
        """
        List the configured entities.

        Returns:
            Entity ids, in the order the API returned them

        """
        return parse_entities(self._client.get_json("/entities"))

    def get(self, entity_id: str) -> Entity:
        """
        Get an entity by ID.

        Args:
            entity_id: The entity ID (e.g. "wit$temperature")

        Returns:
            Entity with its values

        """
        _require("entity_id", entity_id)
        return Entity.from_dict(self._client.get_json(f"/entities/{entity_id}"))

    def create(self, entity: Entity) -> bytes:
        """
        Create a new entity.

        Args:
            entity: The entity to create; its id names the new entity

        Returns:
            Raw API response

        """
        return self._client.post("/entities", self._client.encode(entity.to_dict()))

    def update(self, entity: Entity) -> bytes:
        """
        Update an entity, addressed by entity.id.

        Args:
            entity: The new entity state

        Returns:
            Raw API response

        """
        _require("entity.id", entity.id)
        return self._client.put(f"/entities/{entity.id}", self._client.encode(entity.to_dict()))

    def delete(self, entity_id: str) -> bytes:
        """
        Delete an entity.

        Args:
            entity_id: The entity ID

        Returns:
            Raw API response

        """
        _require("entity_id", entity_id)
        return self._client.delete(f"/entities/{entity_id}")

    def create_value(self, entity_id: str, value: EntityValue) -> Entity:
        """
        Add a value to an entity.

        Args:
            entity_id: The entity ID
            value: The value and its expressions

        Returns:
            The entity with its updated values

        """
        _require("entity_id", entity_id)
        _require("value.value", value.value)
        result = self._client.post_json(f"/entities/{entity_id}/values", value.to_dict())
        return Entity.from_dict(result)

    def delete_value(self, entity_id: str, value: str) -> bytes:
        """
        Delete a value from an entity.

        Args:
            entity_id: The entity ID
            value: The canonical value

        Returns:
            Raw API response

        """
        _require("entity_id", entity_id)
        _require("value", value)
        return self._client.delete(f"/entities/{entity_id}/values/{value}")

    def create_value_expression(self, entity_id: str, value: str, expression: str) -> Entity:
        """
        Add an expression to an entity value.

        The expression is posted as the raw request body, not as JSON.

        Args:
            entity_id: The entity ID
            value: The canonical value
            expression: The new expression

        Returns:
            The entity with its updated values

        """
        _require("entity_id", entity_id)
        _require("value", value)
        _require("expression", expression)
        body = self._client.post(
            f"/entities/{entity_id}/values/{value}/expressions",
            expression.encode("utf-8"),
            content_type="text/plain; charset=utf-8",
        )
        return Entity.from_dict(self._client.decode(body))

    def delete_value_expression(self, entity_id: str, value: str, expression: str) -> bytes:
        """
        Delete an expression from an entity value.

        Args:
            entity_id: The entity ID
            value: The canonical value
            expression: The expression to remove (form-encoded into the path)

        Returns:
            Raw API response

        """
        _require("entity_id", entity_id)
        _require("value", value)
        # the API uses the singular "expression" segment here, unlike create
        encoded = urllib.parse.quote_plus(expression)
        return self._client.delete(f"/entities/{entity_id}/values/{value}/expression/{encoded}")
