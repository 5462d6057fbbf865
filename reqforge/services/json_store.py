import json
import os
import uuid
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..models.collection import Collection
from ..models.environment import Environment
from ..utils.logger import Logger

ENVIRONMENTS_FILE = "environments.json"
COLLECTIONS_DIR = "collections"

_environment_list = TypeAdapter(List[Environment])


class StoreError(Exception):
    """Raised when a workspace file cannot be read, written or decoded."""


class JsonStore:
    """
    File-backed workspace storage.

    Layout::

        <root>/environments.json
        <root>/history.json
        <root>/templates.json
        <root>/collections/<uuid>.json
    """

    def __init__(self, root: str):
        self.root = root
        self.logger = Logger.get_logger(__name__)
        try:
            os.makedirs(os.path.join(root, COLLECTIONS_DIR), exist_ok=True)
        except OSError as e:
            self.logger.error(f"Could not create workspace at {root}: {e}")
            raise StoreError(f"IO error: {e}") from e

    def load_environments(self) -> List[Environment]:
        data = self.read_json(ENVIRONMENTS_FILE)
        if data is None:
            return []
        try:
            return _environment_list.validate_python(data)
        except ValidationError as e:
            raise StoreError(f"Serialization error: {e}") from e

    def save_environments(self, environments: List[Environment]) -> None:
        self.write_json(ENVIRONMENTS_FILE, _environment_list.dump_python(environments, mode="json"))

    def list_collections(self) -> List[Collection]:
        directory = os.path.join(self.root, COLLECTIONS_DIR)
        collections = []
        try:
            for file_name in sorted(os.listdir(directory)):
                if not file_name.endswith(".json"):
                    continue
                with open(os.path.join(directory, file_name), "r", encoding="utf-8") as f:
                    collections.append(Collection.model_validate_json(f.read()))
        except OSError as e:
            self.logger.error(f"Error listing collections in {directory}: {e}")
            raise StoreError(f"IO error: {e}") from e
        except ValidationError as e:
            self.logger.error(f"Error reading collection in {directory}: {e}")
            raise StoreError(f"Serialization error: {e}") from e
        return collections

    def save_collection(self, collection: Collection) -> None:
        path = self._collection_path(collection.id)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(collection.model_dump_json(indent=2))
        except OSError as e:
            self.logger.error(f"Error saving collection to {path}: {e}")
            raise StoreError(f"IO error: {e}") from e

    def delete_collection(self, collection_id: uuid.UUID) -> None:
        path = self._collection_path(collection_id)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            self.logger.error(f"Error deleting collection file {path}: {e}")
            raise StoreError(f"IO error: {e}") from e

    def read_json(self, name: str) -> Optional[Any]:
        """Parsed content of a flat workspace file, or None when it does not exist."""
        path = os.path.join(self.root, name)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            self.logger.error(f"Error reading {path}: {e}")
            raise StoreError(f"IO error: {e}") from e
        except json.JSONDecodeError as e:
            self.logger.error(f"Error decoding {path}: {e}")
            raise StoreError(f"Serialization error: {e}") from e

    def write_json(self, name: str, data: Any) -> None:
        path = os.path.join(self.root, name)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError) as e:
            self.logger.error(f"Error writing {path}: {e}")
            raise StoreError(f"IO error: {e}") from e

    def _collection_path(self, collection_id: uuid.UUID) -> str:
        return os.path.join(self.root, COLLECTIONS_DIR, f"{collection_id}.json")
