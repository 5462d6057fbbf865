import json
import uuid

import pytest

from reqforge.processors.swagger.schema_example_generator import SchemaExampleGenerator


@pytest.mark.parametrize(
    "schema, expected",
    [
        ({"type": "string"}, "string"),
        ({"type": "string", "format": "email"}, "user@example.com"),
        ({"type": "string", "format": "date-time"}, "2024-01-01T00:00:00Z"),
        ({"type": "string", "format": "date"}, "2024-01-01"),
        ({"type": "integer"}, 0),
        ({"type": "number"}, 0),
        ({"type": "boolean"}, True),
        ({"type": "null"}, None),
        ({"type": "string", "example": "given"}, "given"),
        ({"type": "integer", "default": 42}, 42),
        ({"type": "array", "items": {"type": "integer"}}, [0]),
        ({"properties": {"flag": {"type": "boolean"}}}, {"flag": True}),
        ("not a schema", None),
    ],
)
def test_example_values(schema, expected):
    assert SchemaExampleGenerator({}).example_value(schema) == expected


def test_uuid_format_is_a_valid_uuid():
    value = SchemaExampleGenerator({}).example_value({"type": "string", "format": "uuid"})
    assert uuid.UUID(value).version == 4


def test_refs_are_resolved_including_escaped_segments():
    document = {"components": {"schemas": {"a/b": {"type": "integer", "example": 7}}}}
    generator = SchemaExampleGenerator(document)

    assert generator.resolve_ref("#/components/schemas/a~1b") == {"type": "integer", "example": 7}
    assert generator.example_value({"$ref": "#/components/schemas/a~1b"}) == 7
    assert generator.resolve_ref("#/components/schemas/missing") is None
    assert generator.resolve_ref("other.yaml#/Pet") is None


def test_self_referencing_schema_terminates():
    document = {
        "components": {
            "schemas": {
                "Node": {
                    "type": "object",
                    "properties": {
                        "value": {"type": "integer"},
                        "next": {"$ref": "#/components/schemas/Node"},
                    },
                }
            }
        }
    }

    example = SchemaExampleGenerator(document).example_value({"$ref": "#/components/schemas/Node"})

    assert example == {"value": 0, "next": None}


def test_nesting_is_cut_at_max_depth():
    schema = {"type": "object", "properties": {"a": {"type": "object", "properties": {"b": {"type": "array", "items": {"type": "integer"}}}}}}

    assert SchemaExampleGenerator({}, max_depth=1).example_value(schema) == {"a": {}}
    assert SchemaExampleGenerator({}, max_depth=2).example_value(schema) == {"a": {"b": []}}
    assert SchemaExampleGenerator({}).example_value(schema) == {"a": {"b": [0]}}


def test_generate_body():
    generator = SchemaExampleGenerator({})

    assert generator.generate_body({"type": "object", "properties": {"id": {"type": "integer"}}}) == json.dumps(
        {"id": 0}, indent=2
    )
    assert generator.generate_body(None) == "{}"
    assert generator.generate_body({"$ref": "#/nowhere"}) == "{}"
