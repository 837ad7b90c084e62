"""
Tests for response body unserializers and their registry.
"""

import pytest

from activeresource.config import QueryConfig
from activeresource.faults import UnserializeFault
from activeresource.models import Query
from activeresource.unserializers import (
    JSON_TYPE,
    YAML_TYPE,
    JsonUnserializer,
    Unserializer,
    UnserializerRegistry,
    YamlUnserializer,
)
from tests.conftest import User


class CsvUnserializer(Unserializer):
    data_type = "text/csv"

    def unserialize(self, data):
        header, *rows = [line.split(",") for line in data.strip().splitlines()]
        return [dict(zip(header, row)) for row in rows]


# ============================================================================
# Built-in unserializers
# ============================================================================

class TestJsonUnserializer:

    def test_decodes(self):
        assert JsonUnserializer().unserialize('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_invalid_raises_fault(self):
        with pytest.raises(UnserializeFault) as exc_info:
            JsonUnserializer().unserialize("{oops")
        assert exc_info.value.metadata["data_type"] == JSON_TYPE


class TestYamlUnserializer:

    def test_decodes(self):
        data = YamlUnserializer().unserialize("- id: 1\n  name: a\n- id: 2\n  name: b\n")
        assert data == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]

    def test_invalid_raises_fault(self):
        with pytest.raises(UnserializeFault):
            YamlUnserializer().unserialize("key: [unclosed")


# ============================================================================
# Registry
# ============================================================================

class TestRegistry:

    def test_default_contents(self):
        registry = UnserializerRegistry.default()
        assert len(registry) == 2
        assert set(registry) == {JSON_TYPE, YAML_TYPE}

    def test_lookup_ignores_case_and_parameters(self):
        registry = UnserializerRegistry.default()
        assert isinstance(registry.get("Application/JSON; charset=utf-8"), JsonUnserializer)
        assert "application/x-yaml" in registry
        assert registry.get("text/html") is None

    def test_register_custom(self):
        registry = UnserializerRegistry()
        registry.register(CsvUnserializer())
        assert "text/csv" in registry

    def test_register_under_other_type(self):
        registry = UnserializerRegistry()
        registry.register(JsonUnserializer(), data_type="application/vnd.api+json")
        assert isinstance(registry.get("application/vnd.api+json"), JsonUnserializer)

    def test_register_rejects_non_unserializer(self):
        with pytest.raises(TypeError):
            UnserializerRegistry().register(object())

    def test_base_unserialize_not_implemented(self):
        with pytest.raises(NotImplementedError):
            Unserializer().unserialize("x")


# ============================================================================
# Query integration
# ============================================================================

class TestQueryDecoding:

    def test_yaml_responses(self, api, client):
        query = Query(User, config=QueryConfig(data_type=YAML_TYPE), http_client=client)
        api.queue(text="- id: 1\n- id: 2\n", content_type=YAML_TYPE)
        assert [u.id for u in query.all()] == [1, 2]

    def test_custom_unserializer(self, api, client):
        registry = UnserializerRegistry.default()
        registry.register(CsvUnserializer())
        query = Query(
            User,
            config=QueryConfig(data_type="text/csv"),
            http_client=client,
            unserializers=registry,
        )
        api.queue(text="id,email\n1,a@x.test\n", content_type="text/csv")

        users = query.all()

        assert users[0].id == "1"
        assert users[0].email == "a@x.test"

    def test_unregistered_data_type_leaves_body_raw(self, api, client):
        query = Query(User, config=QueryConfig(data_type="text/csv"), http_client=client)
        api.queue(text="id\n1\n", content_type="text/csv")
        assert query.all() == []

    def test_json_body_ignored_when_yaml_expected(self, api, client):
        query = Query(User, config=QueryConfig(data_type=YAML_TYPE), http_client=client)
        api.queue([{"id": 1}])
        assert query.all() == []
