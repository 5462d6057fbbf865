import json
from typing import Any

import requests
import yaml

from ...utils.logger import Logger
from ..errors import CollectionImportError, ImportErrorKind

YAML_EXTENSIONS = (".yaml", ".yml")


class APIDefinitionLoader:
    """
    Downloads a definition from a URL or loads it from a file and returns the parsed document.
    """

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self.logger = Logger.get_logger(__name__)

    def load(self, api_definition: str) -> Any:
        """
        Load a JSON or YAML definition from a URL or a local file.

        Args:
            api_definition (str): URL or path to the definition.

        Returns:
            The parsed document.

        Raises:
            CollectionImportError: IO when it cannot be read, DESERIALIZATION when it cannot be parsed.
        """
        is_yaml = api_definition.lower().endswith(YAML_EXTENSIONS)
        if api_definition.startswith(("http://", "https://")):
            text = self._fetch(api_definition)
        else:
            text = self._read(api_definition)

        try:
            return yaml.safe_load(text) if is_yaml else json.loads(text)
        except (ValueError, yaml.YAMLError) as e:
            self.logger.error(f"Error parsing API definition {api_definition}: {e}")
            raise CollectionImportError(ImportErrorKind.DESERIALIZATION, f"Failed to parse {api_definition}: {e}") from e

    def _fetch(self, url: str) -> str:
        self.logger.debug(f"Loading API definition from URL: {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Error fetching API definition: {e}")
            raise CollectionImportError(ImportErrorKind.IO, f"Failed to fetch {url}: {e}") from e
        if response.status_code != 200:
            self.logger.error(f"Error fetching API definition: {response.status_code}")
            raise CollectionImportError(
                ImportErrorKind.IO, f"Error fetching API definition: {response.status_code}"
            )
        return response.text

    def _read(self, path: str) -> str:
        self.logger.debug(f"Loading API definition from file: {path}")
        try:
            with open(path, "r", encoding="utf-8") as file:
                return file.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error loading API definition: {e}")
            raise CollectionImportError(ImportErrorKind.IO, f"Failed to open file: {e}") from e
