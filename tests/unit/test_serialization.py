"""
Tests for JSON serialization module.
"""

import json
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

import pytest

from loggable.core.serialization import LoggableJSONEncoder, serialize_json


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


@dataclass
class Person:
    name: str
    age: int


class CustomObject:
    def __init__(self, value):
        self.value = value
        self._hidden = "internal"


class TestLoggableJSONEncoder:
    """Tests for LoggableJSONEncoder."""

    def test_serialize_datetime(self):
        dt = datetime(2025, 1, 15, 12, 30, 45)
        assert json.dumps(dt, cls=LoggableJSONEncoder) == '"2025-01-15T12:30:45"'

    def test_serialize_date(self):
        assert json.dumps(date(2025, 1, 15), cls=LoggableJSONEncoder) == '"2025-01-15"'

    def test_serialize_time(self):
        assert json.dumps(time(12, 30, 45), cls=LoggableJSONEncoder) == '"12:30:45"'

    def test_serialize_uuid(self):
        u = UUID("12345678-1234-5678-1234-567812345678")
        result = json.dumps(u, cls=LoggableJSONEncoder)
        assert result == '"12345678-1234-5678-1234-567812345678"'

    def test_serialize_decimal(self):
        assert json.dumps(Decimal("19.99"), cls=LoggableJSONEncoder) == "19.99"

    def test_serialize_enum(self):
        assert json.dumps(Color.RED, cls=LoggableJSONEncoder) == '"red"'

    def test_serialize_dataclass(self):
        result = json.dumps(Person(name="Alice", age=30), cls=LoggableJSONEncoder)
        assert json.loads(result) == {"name": "Alice", "age": 30}

    def test_serialize_bytes(self):
        # base64 encoded "hello" is "aGVsbG8="
        assert json.dumps(b"hello", cls=LoggableJSONEncoder) == '"aGVsbG8="'

    def test_serialize_set(self):
        result = json.loads(json.dumps({1, 2, 3}, cls=LoggableJSONEncoder))
        assert sorted(result) == [1, 2, 3]

    def test_serialize_object_with_dict_skips_private(self):
        result = json.loads(json.dumps(CustomObject(42), cls=LoggableJSONEncoder))
        assert result == {"value": 42}

    def test_unknown_type_raises(self):
        with pytest.raises(TypeError):
            json.dumps(object(), cls=LoggableJSONEncoder)

    def test_class_objects_are_not_serialized(self):
        with pytest.raises(TypeError):
            json.dumps(Person, cls=LoggableJSONEncoder)


class TestSerializeJson:
    """Tests for serialize_json function."""

    def test_serialize_nested_structure(self):
        data = {
            "timestamp": datetime(2025, 1, 15, 12, 0, 0),
            "id": uuid4(),
            "price": Decimal("99.99"),
            "color": Color.BLUE,
            "person": Person(name="Bob", age=25),
            "tags": {"python", "starlette"},
        }
        parsed = json.loads(serialize_json(data))

        assert parsed["timestamp"] == "2025-01-15T12:00:00"
        assert parsed["price"] == 99.99
        assert parsed["color"] == "blue"
        assert parsed["person"]["name"] == "Bob"
        assert set(parsed["tags"]) == {"python", "starlette"}

    def test_serialize_with_indent(self):
        result = serialize_json({"name": "Alice", "age": 30}, indent=2)
        assert "  " in result
        assert "\n" in result

    def test_non_ascii_kept(self):
        assert serialize_json({"name": "Zoë"}) == '{"name": "Zoë"}'

    def test_circular_reference_raises(self):
        obj = {}
        obj["self"] = obj
        with pytest.raises(ValueError):
            serialize_json(obj)
