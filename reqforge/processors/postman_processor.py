from typing import Any

from ..models.collection import Collection
from ..utils.logger import Logger
from .api_processor import APIProcessor
from .postman.postman_utils import PostmanUtils
from .native.workspace_validation import validate_collection
from .swagger.api_definition_loader import APIDefinitionLoader


class PostmanProcessor(APIProcessor):
    """Imports Postman v2.1 collections."""

    def __init__(self, api_definition_loader: APIDefinitionLoader):
        self.api_definition_loader = api_definition_loader
        self.logger = Logger.get_logger(__name__)

    def parse(self, data: Any) -> Collection:
        collection = PostmanUtils.parse_collection(data)
        validate_collection(collection)
        self.logger.debug(f"Parsed Postman collection '{collection.name}' ({len(collection.tree)} top-level items)")
        return collection
