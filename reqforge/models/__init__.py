from .collection import Collection, CollectionItem, Folder, RequestRef
from .environment import Environment, Variable
from .history import RequestHistoryEntry, ResponseSnapshot
from .request import (
    BodyType,
    FormUrlEncodedBody,
    HttpMethod,
    KeyValuePair,
    NoBody,
    RawBody,
    RawContentType,
    RequestDefinition,
)
from .response import HttpResponse
from .template import RequestTemplate, TemplateApplicationResult, TemplateCategory, TemplateVariable

__all__ = [
    "BodyType",
    "Collection",
    "CollectionItem",
    "Environment",
    "Folder",
    "FormUrlEncodedBody",
    "HttpMethod",
    "HttpResponse",
    "KeyValuePair",
    "NoBody",
    "RawBody",
    "RawContentType",
    "RequestDefinition",
    "RequestHistoryEntry",
    "RequestRef",
    "RequestTemplate",
    "ResponseSnapshot",
    "TemplateApplicationResult",
    "TemplateCategory",
    "TemplateVariable",
    "Variable",
]
