import json
from typing import List
from urllib.parse import urlsplit

from ..models.request import (
    BodyType,
    FormUrlEncodedBody,
    HttpMethod,
    KeyValuePair,
    NoBody,
    RawBody,
    RawContentType,
    RequestDefinition,
)

ALLOWED_SCHEMES = ("http", "https")

# RFC 7230 token delimiters
HEADER_NAME_DELIMITERS = frozenset('()<>@,;:\\"/[]?={} \t')


class RequestValidationError(Exception):
    """Base class for every pre-flight validation failure."""

    prefix = "Validation error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class InvalidUrlError(RequestValidationError):
    prefix = "URL validation error"


class InvalidHeaderError(RequestValidationError):
    prefix = "Header validation error"


class InvalidBodyError(RequestValidationError):
    prefix = "Body validation error"


class InvalidMethodError(RequestValidationError):
    prefix = "Method validation error"


class MultipleValidationErrors(RequestValidationError):
    """Every independent failure of one request, reported together."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n  - ".join(self.errors))

    def __str__(self) -> str:
        return f"Request validation failed:\n  - {self.message}"


def validate_url(url: str) -> None:
    """
    Check that ``url`` is an absolute http(s) URL with a host.

    Raises:
        InvalidUrlError: describing the first problem found.
    """
    if not url.strip():
        raise InvalidUrlError("URL cannot be empty")

    try:
        parts = urlsplit(url.strip())
        # Accessing the port validates it
        _ = parts.port
    except ValueError as e:
        raise InvalidUrlError(f"Failed to parse URL: {e}") from e

    if not parts.scheme or (not parts.netloc and "://" not in url):
        raise InvalidUrlError("Failed to parse URL: relative URL without a base")

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(f"Invalid scheme '{parts.scheme}'. Only 'http' and 'https' are supported")

    if not parts.hostname:
        raise InvalidUrlError("URL must have a valid host")


def validate_header_pair(key: str, value: str) -> None:
    if not key.strip():
        raise InvalidHeaderError("Header name cannot be empty")

    for ch in key:
        if not ("\x21" <= ch <= "\x7e") or ch in HEADER_NAME_DELIMITERS:
            raise InvalidHeaderError(f"Header name contains invalid character '{ch}': {key}")

    for ch in value:
        if ch == "\t":
            continue
        if ord(ch) < 0x20 or ord(ch) == 0x7F:
            raise InvalidHeaderError(f"Header value contains control character in header '{key}'")
        # Only visible ASCII and spaces can be written to the wire as-is
        if ord(ch) > 0x7E:
            raise InvalidHeaderError(f"Header value contains non-ASCII character '{ch}' in header '{key}'")


def validate_headers(headers: List[KeyValuePair]) -> None:
    """
    Validate every enabled header, collecting all failures.

    Duplicate detection is case-insensitive and ignores disabled headers.
    """
    errors: List[str] = []
    seen = set()

    for header in headers:
        if not header.enabled:
            continue
        try:
            validate_header_pair(header.key, header.value)
        except InvalidHeaderError as e:
            errors.append(str(e))
            continue

        name = header.key.lower()
        if name in seen:
            errors.append(f"Duplicate header detected: '{header.key}'")
        else:
            seen.add(name)

    if errors:
        raise InvalidHeaderError("Multiple header validation errors:\n  - " + "\n  - ".join(errors))


def validate_body(method: HttpMethod, body: BodyType) -> None:
    """
    Check the body against the method and its declared content type.

    Raises:
        InvalidBodyError: describing the first problem found.
    """
    match body:
        case NoBody():
            return
        case RawBody(content=content, content_type=content_type):
            _ensure_method_supports_body(method)
            if not content.strip():
                raise InvalidBodyError("Request body content is empty")
            match content_type:
                case RawContentType.JSON:
                    try:
                        json.loads(content)
                    except ValueError as e:
                        raise InvalidBodyError(f"Invalid JSON body: {e}") from e
                case RawContentType.XML:
                    stripped = content.strip()
                    if not stripped.startswith("<") or not stripped.endswith(">"):
                        raise InvalidBodyError(
                            "XML body must be well-formed (should start with '<' and end with '>')"
                        )
                case RawContentType.TEXT | RawContentType.HTML:
                    return
        case FormUrlEncodedBody(fields=fields):
            _ensure_method_supports_body(method)
            if not fields:
                raise InvalidBodyError("Form-encoded body must contain at least one field")
            for pair in fields:
                if pair.enabled and not pair.key.strip():
                    raise InvalidBodyError("Form field name cannot be empty")


def validate_request(request: RequestDefinition) -> None:
    """
    Run URL, header and body checks without stopping at the first failure.

    Raises:
        MultipleValidationErrors: listing every failed check.
    """
    errors: List[str] = []

    for check in (
        lambda: validate_url(request.url),
        lambda: validate_headers(request.headers),
        lambda: validate_body(request.method, request.body),
    ):
        try:
            check()
        except RequestValidationError as e:
            errors.append(str(e))

    if errors:
        raise MultipleValidationErrors(errors)


def _ensure_method_supports_body(method: HttpMethod) -> None:
    if not method.supports_body:
        raise InvalidBodyError(f"HTTP method {method} does not support a request body")
