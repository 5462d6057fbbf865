from .api_definition_loader import APIDefinitionLoader
from .schema_example_generator import SchemaExampleGenerator

__all__ = [
    "APIDefinitionLoader",
    "SchemaExampleGenerator",
]
