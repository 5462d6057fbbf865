import uuid
from typing import Any, Dict, List, Optional

from ...models.collection import Collection
from ...models.request import (
    BodyType,
    FormUrlEncodedBody,
    HttpMethod,
    KeyValuePair,
    NoBody,
    RawBody,
    RawContentType,
    RequestDefinition,
)
from ..errors import CollectionImportError, ImportErrorKind


class PostmanUtils:
    """
    All pure‐logic for parsing Postman v2.1 JSON → Collection, Folder, RequestDefinition.
    """

    raw_languages = {
        "json": RawContentType.JSON,
        "xml": RawContentType.XML,
        "html": RawContentType.HTML,
    }

    @staticmethod
    def parse_collection(data: Any) -> Collection:
        if not isinstance(data, dict) or "info" not in data:
            raise CollectionImportError(ImportErrorKind.POSTMAN_FORMAT, "Missing 'info' field in Postman collection")

        name = data["info"].get("name") if isinstance(data["info"], dict) else None
        if not isinstance(name, str):
            raise CollectionImportError(
                ImportErrorKind.POSTMAN_FORMAT, "Missing 'name' field in Postman collection info"
            )

        items = data.get("item")
        if not isinstance(items, list):
            raise CollectionImportError(ImportErrorKind.POSTMAN_FORMAT, "Missing 'item' field in Postman collection")

        collection = Collection(name=name)
        for item in items:
            PostmanUtils._add_item(collection, item, None)
        return collection

    @staticmethod
    def _add_item(collection: Collection, item: Any, parent_folder: Optional[uuid.UUID]) -> None:
        if not isinstance(item, dict):
            return
        if "request" in item:
            collection.add_request(PostmanUtils.extract_request(item), parent_folder)
        elif "item" in item:
            children = item["item"]
            if not isinstance(children, list):
                raise CollectionImportError(ImportErrorKind.POSTMAN_FORMAT, "Invalid 'item' field in Postman folder")
            folder = collection.add_folder(item.get("name") or "Unnamed", parent_folder)
            for child in children:
                PostmanUtils._add_item(collection, child, folder.id)

    @staticmethod
    def extract_request(item: Dict[str, Any]) -> RequestDefinition:
        name = item.get("name") or "Unnamed Request"
        req = item["request"]

        # A string request references another definition; it is not resolved
        if isinstance(req, str) or not isinstance(req, dict):
            return RequestDefinition.new(name, HttpMethod.GET, "")

        try:
            method = HttpMethod.parse(req.get("method") or "GET")
        except ValueError as e:
            raise CollectionImportError(ImportErrorKind.VALIDATION, str(e)) from e

        url_value = req.get("url")
        query_params: List[KeyValuePair] = []
        if isinstance(url_value, dict) and isinstance(url_value.get("query"), list):
            query_params = PostmanUtils.extract_pairs(url_value["query"])

        body = PostmanUtils.extract_body(req["body"]) if isinstance(req.get("body"), dict) else NoBody()

        return RequestDefinition(
            name=name,
            method=method,
            url=PostmanUtils.extract_url(url_value),
            headers=PostmanUtils.extract_pairs(req.get("header")),
            query_params=query_params,
            body=body,
        )

    @staticmethod
    def extract_url(url_value: Any) -> str:
        if isinstance(url_value, str):
            return url_value
        if not isinstance(url_value, dict):
            return ""

        raw = url_value.get("raw")
        if isinstance(raw, str):
            # The query array is imported separately; keep params from being sent twice
            if isinstance(url_value.get("query"), list):
                return raw.split("?", 1)[0]
            return raw

        protocol = url_value.get("protocol") or "https"
        host = url_value.get("host")
        if isinstance(host, list):
            host_str = ".".join(part for part in host if isinstance(part, str))
        elif isinstance(host, str):
            host_str = host
        else:
            host_str = "localhost"
        if url_value.get("port"):
            host_str = f"{host_str}:{url_value['port']}"

        path = url_value.get("path")
        if isinstance(path, list):
            parts = [part for part in path if isinstance(part, str)]
            path_str = "/" + "/".join(parts) if parts else ""
        elif isinstance(path, str) and path:
            path_str = path if path.startswith("/") else "/" + path
        else:
            path_str = ""

        return f"{protocol}://{host_str}{path_str}"

    @staticmethod
    def extract_pairs(entries: Any, skip_files: bool = False) -> List[KeyValuePair]:
        """Convert Postman ``{key, value, disabled, description}`` entries, skipping empty keys."""
        if not isinstance(entries, list):
            return []
        pairs = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("key"):
                continue
            if skip_files and entry.get("type") == "file":
                continue
            value = entry.get("value")
            pairs.append(
                KeyValuePair(
                    key=str(entry["key"]),
                    value="" if value is None else str(value),
                    enabled=not bool(entry.get("disabled", False)),
                    description=PostmanUtils._description(entry.get("description")),
                )
            )
        return pairs

    @staticmethod
    def extract_body(body: Dict[str, Any]) -> BodyType:
        match body.get("mode"):
            case "raw":
                language = ((body.get("options") or {}).get("raw") or {}).get("language")
                return RawBody(
                    content=body.get("raw") or "",
                    content_type=PostmanUtils.raw_languages.get(language, RawContentType.TEXT),
                )
            case "urlencoded":
                return FormUrlEncodedBody(fields=PostmanUtils.extract_pairs(body.get("urlencoded")))
            case "formdata":
                return FormUrlEncodedBody(fields=PostmanUtils.extract_pairs(body.get("formdata"), skip_files=True))
            case _:
                return NoBody()

    @staticmethod
    def _description(description: Any) -> Optional[str]:
        # v2.1 allows either a string or {"content": ..., "type": ...}
        if isinstance(description, str):
            return description
        if isinstance(description, dict) and isinstance(description.get("content"), str):
            return description["content"]
        return None
