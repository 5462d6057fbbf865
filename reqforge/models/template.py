import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .request import BodyType, HttpMethod, KeyValuePair, NoBody, RequestDefinition, utc_now


class TemplateCategory(str, Enum):
    BASIC = "Basic"
    AUTHENTICATION = "Authentication"
    API = "API"
    TESTING = "Testing"
    CUSTOM = "Custom"

    def __str__(self) -> str:
        return self.value


class TemplateVariable(BaseModel):
    name: str
    description: str = ""
    default_value: Optional[str] = None
    required: bool = True

    def with_default(self, value: str) -> "TemplateVariable":
        """A variable with a default no longer needs a value from the caller."""
        return self.model_copy(update={"default_value": value, "required": False})

    def optional(self) -> "TemplateVariable":
        return self.model_copy(update={"required": False})


class RequestTemplate(BaseModel):
    """
    A reusable request stencil.

    ``url_template``, header/query keys and values and the body may contain
    ``{{name}}`` tokens matching the declared ``variables``.
    """

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    description: str = ""
    category: TemplateCategory = TemplateCategory.CUSTOM
    method: HttpMethod = HttpMethod.GET
    url_template: str = ""
    headers: List[KeyValuePair] = Field(default_factory=list)
    query_params: List[KeyValuePair] = Field(default_factory=list)
    body: BodyType = Field(default_factory=NoBody)
    variables: List[TemplateVariable] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    def with_header(self, key: str, value: str) -> "RequestTemplate":
        return self.model_copy(update={"headers": [*self.headers, KeyValuePair(key=key, value=value)]})

    def with_query_param(self, key: str, value: str) -> "RequestTemplate":
        return self.model_copy(update={"query_params": [*self.query_params, KeyValuePair(key=key, value=value)]})

    def with_body(self, body: BodyType) -> "RequestTemplate":
        return self.model_copy(update={"body": body})

    def with_variable(self, variable: TemplateVariable) -> "RequestTemplate":
        return self.model_copy(update={"variables": [*self.variables, variable]})


@dataclass
class TemplateApplicationResult:
    """A materialized request plus the required variables that had no value."""

    request: RequestDefinition
    missing_variables: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing_variables
