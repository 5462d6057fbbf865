import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, method: str) -> "HttpMethod":
        """Case-insensitive lookup; raises ValueError for unknown verbs."""
        try:
            return cls(method.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown HTTP method: {method}") from None

    @property
    def supports_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class RawContentType(str, Enum):
    JSON = "Json"
    XML = "Xml"
    TEXT = "Text"
    HTML = "Html"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]


_MIME_TYPES = {
    RawContentType.JSON: "application/json",
    RawContentType.XML: "application/xml",
    RawContentType.TEXT: "text/plain",
    RawContentType.HTML: "text/html",
}


class KeyValuePair(BaseModel):
    """A header, query parameter or form field."""

    key: str
    value: str = ""
    enabled: bool = True
    description: Optional[str] = None


class NoBody(BaseModel):
    type: Literal["None"] = "None"


class RawBody(BaseModel):
    type: Literal["Raw"] = "Raw"
    content: str
    content_type: RawContentType = RawContentType.JSON


class FormUrlEncodedBody(BaseModel):
    type: Literal["FormUrlEncoded"] = "FormUrlEncoded"
    fields: List[KeyValuePair] = Field(default_factory=list)


BodyType = Annotated[Union[NoBody, RawBody, FormUrlEncodedBody], Field(discriminator="type")]


class RequestDefinition(BaseModel):
    """
    The core, persistable request definition.

    Every string field may contain ``{{variable}}`` placeholders which are
    resolved against the active environment right before execution.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    method: HttpMethod = HttpMethod.GET
    url: str = ""
    headers: List[KeyValuePair] = Field(default_factory=list)
    query_params: List[KeyValuePair] = Field(default_factory=list)
    body: BodyType = Field(default_factory=NoBody)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @classmethod
    def new(cls, name: str, method: HttpMethod, url: str) -> "RequestDefinition":
        now = utc_now()
        return cls(name=name, method=method, url=url, created_at=now, updated_at=now)

    def touch(self) -> None:
        """Mark the request as edited."""
        self.updated_at = utc_now()

    def validate_request(self) -> None:
        """
        Run the pre-flight checks on this request.

        Raises:
            RequestValidationError: if the URL, headers or body are invalid.
        """
        from ..services.validation import validate_request

        validate_request(self)
