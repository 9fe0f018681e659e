"""Tests for WitClient entity operations against a fake transport."""

import json

import pytest

from wit_cli.core.client import (
    DeserializationError,
    SerializationError,
    TransportError,
    UnexpectedStatusError,
    ValidationError,
)
from wit_cli.core.types import Entity, EntityValue

BASE_URL = "https://wit.test"

FAVORITE_CITY = json.dumps(
    {
        "id": "favorite_city",
        "doc": "",
        "builtin": False,
        "values": [{"value": "Paris", "expressions": ["City of Light"]}],
    }
).encode()


class TestList:
    def test_list(self, client, transport):
        transport.reply(b'["wit$temperature","favorite_city"]')
        assert client.entities.list() == ["wit$temperature", "favorite_city"]
        assert transport.last.method == "GET"
        assert transport.last.url == f"{BASE_URL}/entities"

    def test_malformed_json(self, client, transport):
        transport.reply(b'["wit$temperature",')
        with pytest.raises(DeserializationError):
            client.entities.list()

    def test_not_an_array(self, client, transport):
        transport.reply(b'{"entities": []}')
        with pytest.raises(DeserializationError):
            client.entities.list()


class TestGet:
    def test_get(self, client, transport):
        transport.reply(FAVORITE_CITY)
        entity = client.entities.get("favorite_city")
        assert entity.id == "favorite_city"
        assert entity.values == [EntityValue(value="Paris", expressions=["City of Light"])]
        assert transport.last.method == "GET"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city"

    def test_builtin_id_is_verbatim(self, client, transport):
        transport.reply(b'{"id": "wit$temperature", "builtin": true}')
        entity = client.entities.get("wit$temperature")
        assert entity.builtin is True
        assert transport.last.url == f"{BASE_URL}/entities/wit$temperature"

    def test_malformed_body(self, client, transport):
        transport.reply(b"not json")
        with pytest.raises(DeserializationError):
            client.entities.get("favorite_city")

    def test_empty_id(self, client, transport):
        with pytest.raises(ValidationError):
            client.entities.get("")
        assert transport.calls == []


class TestCreate:
    def test_create(self, client, transport):
        transport.reply(b'{"id": "favorite_city"}')
        entity = Entity(id="favorite_city", doc="A city that I like")
        result = client.entities.create(entity)

        assert result == b'{"id": "favorite_city"}'
        assert transport.last.method == "POST"
        assert transport.last.url == f"{BASE_URL}/entities"
        assert json.loads(transport.last.body) == {
            "builtin": False,
            "doc": "A city that I like",
            "id": "favorite_city",
            "values": [],
        }

    def test_does_not_mutate_input(self, client, transport):
        entity = Entity(id="favorite_city", values=[EntityValue(value="Paris", expressions=["Paname"])])
        before = Entity.from_dict(entity.to_dict())
        client.entities.create(entity)
        assert entity == before

    def test_unserializable(self, client, transport):
        entity = Entity(id="favorite_city", doc=object())
        with pytest.raises(SerializationError):
            client.entities.create(entity)
        assert transport.calls == []

    def test_values_must_be_entity_values(self, client, transport):
        entity = Entity(id="favorite_city", values=[{"value": "Paris", "expressions": []}])
        with pytest.raises(SerializationError):
            client.entities.create(entity)
        with pytest.raises(SerializationError):
            client.entities.update(entity)
        assert transport.calls == []


class TestUpdate:
    def test_update(self, client, transport):
        entity = Entity(id="favorite_city", doc="Cities", values=[EntityValue(value="Paris")])
        result = client.entities.update(entity)

        assert result == b"{}"
        assert transport.last.method == "PUT"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city"
        assert Entity.from_dict(json.loads(transport.last.body)) == entity

    def test_requires_id(self, client, transport):
        with pytest.raises(ValidationError):
            client.entities.update(Entity(id=""))
        assert transport.calls == []

    def test_does_not_mutate_input(self, client, transport):
        entity = Entity(id="favorite_city", values=[EntityValue(value="Paris")])
        client.entities.update(entity)
        assert entity == Entity(id="favorite_city", values=[EntityValue(value="Paris")])


class TestDelete:
    def test_delete(self, client, transport):
        transport.reply(b'{"deleted": "favorite_city"}')
        assert client.entities.delete("favorite_city") == b'{"deleted": "favorite_city"}'
        assert transport.last.method == "DELETE"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city"


class TestValues:
    def test_create_value(self, client, transport):
        transport.reply(FAVORITE_CITY)
        value = EntityValue(value="Paris", expressions=["City of Light"])
        entity = client.entities.create_value("favorite_city", value)

        assert entity.id == "favorite_city"
        assert transport.last.method == "POST"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city/values"
        assert json.loads(transport.last.body) == {"value": "Paris", "expressions": ["City of Light"]}

    def test_create_value_requires_value(self, client, transport):
        with pytest.raises(ValidationError):
            client.entities.create_value("favorite_city", EntityValue(value=""))
        assert transport.calls == []

    def test_create_value_bad_body(self, client, transport):
        transport.reply(b"[]")
        with pytest.raises(DeserializationError):
            client.entities.create_value("favorite_city", EntityValue(value="Paris"))

    def test_delete_value(self, client, transport):
        client.entities.delete_value("favorite_city", "Paris")
        assert transport.last.method == "DELETE"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city/values/Paris"


class TestExpressions:
    def test_create_expression_sends_raw_body(self, client, transport):
        transport.reply(FAVORITE_CITY)
        entity = client.entities.create_value_expression("favorite_city", "Barcelona", "Paella")

        assert entity.id == "favorite_city"
        assert transport.last.method == "POST"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city/values/Barcelona/expressions"
        assert transport.last.body == b"Paella"
        assert transport.last.content_type.startswith("text/plain")

    def test_create_expression_requires_expression(self, client, transport):
        with pytest.raises(ValidationError):
            client.entities.create_value_expression("favorite_city", "Barcelona", "")

    def test_delete_expression_empty(self, client, transport):
        client.entities.delete_value_expression("favorite_city", "Paris", "")
        assert transport.last.method == "DELETE"
        assert transport.last.url == f"{BASE_URL}/entities/favorite_city/values/Paris/expression/"

    def test_delete_expression_is_form_encoded(self, client, transport):
        client.entities.delete_value_expression("favorite_city", "Paris", "City of Light/é?&")
        assert transport.last.url == (
            f"{BASE_URL}/entities/favorite_city/values/Paris/expression/City+of+Light%2F%C3%A9%3F%26"
        )


OPERATIONS = [
    ("list", lambda c: c.entities.list()),
    ("get", lambda c: c.entities.get("favorite_city")),
    ("create", lambda c: c.entities.create(Entity(id="favorite_city"))),
    ("update", lambda c: c.entities.update(Entity(id="favorite_city"))),
    ("delete", lambda c: c.entities.delete("favorite_city")),
    ("create_value", lambda c: c.entities.create_value("favorite_city", EntityValue(value="Paris"))),
    ("delete_value", lambda c: c.entities.delete_value("favorite_city", "Paris")),
    ("create_expr", lambda c: c.entities.create_value_expression("favorite_city", "Paris", "Paname")),
    ("delete_expr", lambda c: c.entities.delete_value_expression("favorite_city", "Paris", "Paname")),
]


class TestFailures:
    @pytest.mark.parametrize("name,op", OPERATIONS, ids=[n for n, _ in OPERATIONS])
    def test_non_200_raises(self, client, transport, name, op):
        # A well-formed body must still be rejected
        transport.reply(FAVORITE_CITY, status=404)
        with pytest.raises(UnexpectedStatusError) as exc_info:
            op(client)
        assert exc_info.value.status == 404
        assert exc_info.value.body == FAVORITE_CITY

    @pytest.mark.parametrize("status", [201, 204, 400, 500])
    def test_only_200_is_success(self, client, transport, status):
        transport.reply(b'["favorite_city"]', status=status)
        with pytest.raises(UnexpectedStatusError):
            client.entities.list()

    @pytest.mark.parametrize("name,op", OPERATIONS, ids=[n for n, _ in OPERATIONS])
    def test_transport_error_propagates(self, client, transport, name, op):
        transport.fail = True
        with pytest.raises(TransportError):
            op(client)

    def test_status_error_details(self, client, transport):
        transport.reply(b'{"error": "Unknown entity"}', status=400)
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.entities.get("nope")
        assert exc_info.value.to_dict() == {
            "error": "Unexpected status 400",
            "details": {"response": {"error": "Unknown entity"}},
            "status": 400,
        }
