import json
from typing import Any, Dict, List, Optional, Tuple

from ..models.collection import Collection
from ..models.request import BodyType, HttpMethod, KeyValuePair, NoBody, RawBody, RawContentType, RequestDefinition
from ..utils.logger import Logger
from .api_processor import APIProcessor
from .errors import CollectionImportError, ImportErrorKind
from .native.workspace_validation import validate_collection
from .swagger import APIDefinitionLoader, SchemaExampleGenerator

OPERATION_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class SwaggerProcessor(APIProcessor):
    """Imports OpenAPI 3.x and Swagger 2.x definitions as a flat collection, one request per operation."""

    def __init__(self, api_definition_loader: APIDefinitionLoader):
        """
        Initialize the SwaggerProcessor.

        Args:
            api_definition_loader (APIDefinitionLoader): Service to load API definition from URL or file.
        """
        self.api_definition_loader = api_definition_loader
        self.logger = Logger.get_logger(__name__)

    def parse(self, data: Any) -> Collection:
        """
        Build a collection from an OpenAPI document.

        Args:
            data: The parsed OpenAPI/Swagger document.

        Returns:
            Collection named after ``info.title``.

        Raises:
            CollectionImportError: OPENAPI_FORMAT for an unsupported version or missing
                ``info``/``paths``; VALIDATION if the result is inconsistent.
        """
        if not isinstance(data, dict) or not self._is_supported_version(data):
            raise CollectionImportError(
                ImportErrorKind.OPENAPI_FORMAT, "Unsupported OpenAPI version. Only 2.x and 3.x are supported."
            )
        info = data.get("info")
        if not isinstance(info, dict):
            raise CollectionImportError(ImportErrorKind.OPENAPI_FORMAT, "Missing 'info' field in OpenAPI spec")
        paths = data.get("paths")
        if not isinstance(paths, dict):
            raise CollectionImportError(ImportErrorKind.OPENAPI_FORMAT, "Missing 'paths' field in OpenAPI spec")

        collection = Collection(name=info.get("title") or "OpenAPI Collection")
        base_url = (self._extract_base_url(data) or "").rstrip("/")
        generator = SchemaExampleGenerator(data)

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                continue
            for method_name in OPERATION_METHODS:
                operation = path_item.get(method_name)
                if not isinstance(operation, dict):
                    continue
                if method_name == "trace":
                    self.logger.debug(f"Skipping TRACE {path}: method not supported")
                    continue
                request = self._build_request(method_name, path, path_item, operation, base_url, generator)
                collection.add_request(request)
                self.logger.debug(f"{request.method} {request.url} -> '{request.name}'")

        validate_collection(collection)
        return collection

    @staticmethod
    def _is_supported_version(document: Dict[str, Any]) -> bool:
        version = document.get("openapi", document.get("swagger"))
        # YAML turns an unquoted `swagger: 2.0` into a float
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            version = str(version)
        return isinstance(version, str) and version.startswith(("2.", "3."))

    @staticmethod
    def _extract_base_url(api_spec: Dict[str, Any]) -> Optional[str]:
        """Extract base URL from OpenAPI specification"""
        servers = api_spec.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict) and "url" in servers[0]:
            return servers[0]["url"]

        host = api_spec.get("host")
        if host:
            scheme = "https"
            if "schemes" in api_spec and api_spec["schemes"]:
                scheme = api_spec["schemes"][0]

            base_path = api_spec.get("basePath", "")
            return f"{scheme}://{host}{base_path}"

        return None

    def _build_request(
        self,
        method_name: str,
        path: str,
        path_item: Dict[str, Any],
        operation: Dict[str, Any],
        base_url: str,
        generator: SchemaExampleGenerator,
    ) -> RequestDefinition:
        method = HttpMethod.parse(method_name)
        headers: List[KeyValuePair] = []
        query_params: List[KeyValuePair] = []

        for param in self._merged_parameters(path_item, operation, generator):
            pair = KeyValuePair(
                key=str(param.get("name", "")),
                value="",
                enabled=bool(param.get("required", False)),
                description=param["description"] if isinstance(param.get("description"), str) else None,
            )
            if not pair.key:
                continue
            if param.get("in") == "header":
                headers.append(pair)
            elif param.get("in") == "query":
                query_params.append(pair)

        body = self._build_body(operation.get("requestBody"), generator)
        if isinstance(body, RawBody) and not any(h.key.lower() == "content-type" for h in headers):
            headers.append(
                KeyValuePair(key="Content-Type", value=body.content_type.mime_type, description="Content-Type header")
            )

        return RequestDefinition(
            name=self._operation_name(method, path, operation),
            method=method,
            url=f"{base_url}{path}",
            headers=headers,
            query_params=query_params,
            body=body,
        )

    @staticmethod
    def _operation_name(method: HttpMethod, path: str, operation: Dict[str, Any]) -> str:
        for key in ("summary", "operationId"):
            if isinstance(operation.get(key), str) and operation[key]:
                return operation[key]
        segments = [s for s in path.split("/") if s and not s.startswith("{")]
        return f"{method} {segments[-1] if segments else 'endpoint'}"

    @staticmethod
    def _merged_parameters(
        path_item: Dict[str, Any], operation: Dict[str, Any], generator: SchemaExampleGenerator
    ) -> List[Dict[str, Any]]:
        """Path-level parameters overridden by operation-level ones with the same name and location."""
        merged: Dict[Tuple[Any, Any], Dict[str, Any]] = {}
        for source in (path_item.get("parameters"), operation.get("parameters")):
            if not isinstance(source, list):
                continue
            for param in source:
                if isinstance(param, dict) and "$ref" in param:
                    param = generator.resolve_ref(param["$ref"])
                if isinstance(param, dict):
                    merged[(param.get("name"), param.get("in"))] = param
        return list(merged.values())

    @staticmethod
    def _build_body(request_body: Any, generator: SchemaExampleGenerator) -> BodyType:
        if request_body is None:
            return NoBody()
        if isinstance(request_body, dict) and "$ref" in request_body:
            request_body = generator.resolve_ref(request_body["$ref"])

        content = request_body.get("content") if isinstance(request_body, dict) else None
        if isinstance(content, dict):
            json_content = content.get("application/json")
            if isinstance(json_content, dict):
                if "example" in json_content:
                    return RawBody(content=json.dumps(json_content["example"], indent=2), content_type=RawContentType.JSON)
                if "schema" in json_content:
                    return RawBody(
                        content=generator.generate_body(json_content["schema"]), content_type=RawContentType.JSON
                    )

            text_content = content.get("text/plain")
            if isinstance(text_content, dict) and isinstance(text_content.get("example"), str):
                return RawBody(content=text_content["example"], content_type=RawContentType.TEXT)

        return RawBody(content="{}", content_type=RawContentType.JSON)
