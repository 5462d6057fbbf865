from typing import Any

from pydantic import BaseModel, ValidationError

from ..models.collection import Collection
from ..models.environment import Environment
from ..utils.logger import Logger
from .api_processor import APIProcessor
from .errors import CollectionExportError, CollectionImportError, ExportErrorKind, ImportErrorKind
from .native.workspace_validation import validate_collection, validate_environment
from .swagger.api_definition_loader import APIDefinitionLoader


class NativeProcessor(APIProcessor):
    """Lossless JSON export/import of collections and environments."""

    def __init__(self, api_definition_loader: APIDefinitionLoader):
        self.api_definition_loader = api_definition_loader
        self.logger = Logger.get_logger(__name__)

    def parse(self, data: Any) -> Collection:
        return self.parse_collection(data)

    def import_collection(self, path: str) -> Collection:
        return self.process_api_definition(path)

    def import_environment(self, path: str) -> Environment:
        environment = self.parse_environment(self.api_definition_loader.load(path))
        self.logger.info(f"✅ Imported environment '{environment.name}'")
        return environment

    def export_collection(self, collection: Collection, path: str) -> None:
        self._write(path, self.serialize_collection(collection))
        self.logger.info(f"Exported collection '{collection.name}' to {path}")

    def export_environment(self, environment: Environment, path: str) -> None:
        self._write(path, self.serialize_environment(environment))
        self.logger.info(f"Exported environment '{environment.name}' to {path}")

    @staticmethod
    def parse_collection(data: Any) -> Collection:
        try:
            collection = Collection.model_validate(data)
        except ValidationError as e:
            raise CollectionImportError(
                ImportErrorKind.DESERIALIZATION, f"Failed to deserialize collection: {e}"
            ) from e
        validate_collection(collection)
        return collection

    @staticmethod
    def parse_environment(data: Any) -> Environment:
        try:
            environment = Environment.model_validate(data)
        except ValidationError as e:
            raise CollectionImportError(
                ImportErrorKind.DESERIALIZATION, f"Failed to deserialize environment: {e}"
            ) from e
        validate_environment(environment)
        return environment

    @staticmethod
    def serialize_collection(collection: Collection) -> str:
        return NativeProcessor._serialize(collection, "collection")

    @staticmethod
    def serialize_environment(environment: Environment) -> str:
        return NativeProcessor._serialize(environment, "environment")

    @staticmethod
    def _serialize(model: BaseModel, what: str) -> str:
        try:
            return model.model_dump_json(indent=2)
        except ValueError as e:
            raise CollectionExportError(ExportErrorKind.SERIALIZATION, f"Failed to serialize {what}: {e}") from e

    def _write(self, path: str, content: str) -> None:
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            self.logger.error(f"Error writing {path}: {e}")
            raise CollectionExportError(ExportErrorKind.IO, f"Failed to create file: {e}") from e
