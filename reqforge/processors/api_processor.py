import json
import logging
import zipfile
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import yaml

from ..configuration.data_sources import DataSource
from ..models.collection import Collection
from ..services.interpolator import Interpolator
from .errors import CollectionImportError
from .swagger.api_definition_loader import APIDefinitionLoader, YAML_EXTENSIONS


class APIProcessor(ABC):
    """Abstract base class for processors that turn a document into a Collection."""

    api_definition_loader: APIDefinitionLoader
    logger: logging.Logger

    @staticmethod
    def set_data_source(api_file_path: str, logger: Optional[logging.Logger] = None) -> DataSource:
        """
        Determines the type of data source by reading and parsing the file.

        Args:
            api_file_path: Path to the file, or a URL
            logger: Logger instance for error reporting

        Returns:
            DataSource: The detected data source type
        """
        if api_file_path.startswith(("http://", "https://")):
            return DataSource.SWAGGER
        if api_file_path.lower().endswith(YAML_EXTENSIONS):
            return DataSource.SWAGGER
        try:
            if zipfile.is_zipfile(api_file_path):
                return DataSource.ARCHIVE
        except OSError as e:
            if logger:
                logger.error(f"Error reading file {api_file_path}: {e}")
            return DataSource.NONE

        encodings = ["utf-8", "utf-8-sig", "latin-1"]

        for encoding in encodings:
            try:
                with open(api_file_path, "r", encoding=encoding) as f:
                    if api_file_path.endswith(".json"):
                        data = json.load(f)
                    else:
                        data = yaml.safe_load(f)

                if isinstance(data, dict):
                    if "openapi" in data or "swagger" in data:
                        return DataSource.SWAGGER
                    elif "info" in data and "item" in data:
                        return DataSource.POSTMAN
                    elif "tree" in data and "requests" in data:
                        return DataSource.NATIVE
                return DataSource.NONE

            except (OSError, ValueError, yaml.YAMLError) as e:
                if logger:
                    logger.error(f"Error reading file {api_file_path} with encoding {encoding}: {e}")
        return DataSource.NONE

    @abstractmethod
    def parse(self, data: Any) -> Collection:
        """Convert an already-parsed document into a validated Collection"""
        pass

    def process_api_definition(self, api_definition_path: str) -> Collection:
        """
        Load and parse a document. Import is all-or-nothing: any failure raises
        and no partial collection is returned.

        Raises:
            CollectionImportError: for any read, parse or validation failure.
        """
        self.logger.info(f"Importing {api_definition_path}")
        data = self.api_definition_loader.load(api_definition_path)
        try:
            collection = self.parse(data)
        except CollectionImportError as e:
            self.logger.error(f"Import of {api_definition_path} failed: {e}")
            raise
        self.logger.info(f"✅ Imported '{collection.name}' with {len(collection.requests)} request(s)")
        return collection

    def extract_env_vars(self, collection: Collection) -> List[str]:
        """Placeholder names referenced by the collection's requests, in tree order"""
        found: Dict[str, None] = {}
        for request_id in collection.iter_request_ids():
            for name in Interpolator.find_placeholders(collection.requests[request_id]):
                found.setdefault(name)
        return list(found)
