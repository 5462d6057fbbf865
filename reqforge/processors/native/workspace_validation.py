from typing import Dict, List
import uuid

from ...models.collection import Collection, CollectionItem, Folder, RequestRef
from ...models.environment import Environment
from ...models.request import RequestDefinition
from ..errors import CollectionImportError, ImportErrorKind


def validate_collection(collection: Collection) -> None:
    """
    Semantic checks applied to every imported collection.

    Raises:
        CollectionImportError: VALIDATION kind, for an empty collection or folder
            name, or a tree reference to a request missing from ``requests``.
    """
    if not collection.name.strip():
        raise CollectionImportError(ImportErrorKind.VALIDATION, "Collection name cannot be empty")
    _validate_items(collection.tree, collection.requests)


def _validate_items(items: List[CollectionItem], requests: Dict[uuid.UUID, RequestDefinition]) -> None:
    for item in items:
        match item:
            case RequestRef(id=request_id):
                if request_id not in requests:
                    raise CollectionImportError(
                        ImportErrorKind.VALIDATION, f"Request ID {request_id} not found in collection"
                    )
            case Folder(name=name, children=children):
                if not name.strip():
                    raise CollectionImportError(ImportErrorKind.VALIDATION, "Folder name cannot be empty")
                _validate_items(children, requests)


def validate_environment(environment: Environment) -> None:
    """
    Raises:
        CollectionImportError: VALIDATION kind, for an empty name or a repeated
            non-empty variable key.
    """
    if not environment.name.strip():
        raise CollectionImportError(ImportErrorKind.VALIDATION, "Environment name cannot be empty")

    seen = set()
    for variable in environment.variables:
        if not variable.key:
            continue
        if variable.key in seen:
            raise CollectionImportError(ImportErrorKind.VALIDATION, f"Duplicate variable key: {variable.key}")
        seen.add(variable.key)
