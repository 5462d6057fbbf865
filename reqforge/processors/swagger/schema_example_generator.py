import json
import uuid
from typing import Any, Dict, FrozenSet, Optional

MAX_SCHEMA_DEPTH = 5

_STRING_FORMATS = {
    "email": "user@example.com",
    "date-time": "2024-01-01T00:00:00Z",
    "date": "2024-01-01",
}


class SchemaExampleGenerator:
    """
    Builds example payloads from JSON schemas found in an OpenAPI document.

    Only document-relative references (``#/...``) are followed. Recursion stops
    after ``max_depth`` nested levels, and a reference that is already being
    expanded higher up the chain yields ``None`` instead of looping.
    """

    def __init__(self, document: Dict[str, Any], max_depth: int = MAX_SCHEMA_DEPTH):
        self.document = document
        self.max_depth = max_depth

    def resolve_ref(self, ref: str) -> Optional[Any]:
        if not isinstance(ref, str) or not ref.startswith("#/"):
            return None
        current: Any = self.document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def generate_body(self, schema: Any) -> str:
        """Pretty-printed JSON example for a request body schema; ``"{}"`` when nothing can be derived."""
        value = self.example_value(schema)
        if value is None:
            return "{}"
        return json.dumps(value, indent=2)

    def example_value(self, schema: Any, depth: int = 0, ref_chain: FrozenSet[str] = frozenset()) -> Any:
        if not isinstance(schema, dict):
            return None

        if "$ref" in schema:
            ref = schema["$ref"]
            if ref in ref_chain:
                return None
            resolved = self.resolve_ref(ref)
            if resolved is None:
                return None
            return self.example_value(resolved, depth, ref_chain | {ref})

        if "example" in schema:
            return schema["example"]
        if "default" in schema:
            return schema["default"]

        schema_type = schema.get("type")
        if schema_type is None and "properties" in schema:
            schema_type = "object"

        match schema_type:
            case "object":
                if depth >= self.max_depth:
                    return {}
                properties = schema.get("properties") or {}
                return {name: self.example_value(prop, depth + 1, ref_chain) for name, prop in properties.items()}
            case "array":
                if depth >= self.max_depth or "items" not in schema:
                    return []
                return [self.example_value(schema["items"], depth + 1, ref_chain)]
            case "string":
                return self._string_example(schema.get("format"))
            case "number" | "integer":
                return 0
            case "boolean":
                return True
            case _:
                return None

    @staticmethod
    def _string_example(fmt: Optional[str]) -> str:
        if fmt == "uuid":
            return str(uuid.uuid4())
        return _STRING_FORMATS.get(fmt, "string")
