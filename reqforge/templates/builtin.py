import uuid
from typing import Tuple

from ..models.request import FormUrlEncodedBody, HttpMethod, KeyValuePair, RawBody, RawContentType
from ..models.template import RequestTemplate, TemplateCategory, TemplateVariable

BUILTIN_NAMESPACE = "reqforge:builtin:"


def _builtin(
    name: str, description: str, category: TemplateCategory, method: HttpMethod, url_template: str
) -> RequestTemplate:
    # Stable ids keep references to builtin templates valid across restarts
    return RequestTemplate(
        id=uuid.uuid5(uuid.NAMESPACE_URL, BUILTIN_NAMESPACE + name),
        name=name,
        description=description,
        category=category,
        method=method,
        url_template=url_template,
    )


def _var(name: str, description: str) -> TemplateVariable:
    return TemplateVariable(name=name, description=description)


BASE_URL = _var("base_url", "The base URL of the API")
PATH = _var("path", "The API endpoint path")
ACCESS_TOKEN = _var("access_token", "The access token for authentication").with_default("your_token_here")


def _get_with_auth() -> RequestTemplate:
    return (
        _builtin(
            "GET with Auth",
            "A GET request with an Authorization header for authenticated API calls",
            TemplateCategory.AUTHENTICATION,
            HttpMethod.GET,
            "{{base_url}}/{{path}}",
        )
        .with_header("Authorization", "Bearer {{access_token}}")
        .with_header("Accept", "application/json")
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(ACCESS_TOKEN)
    )


def _post_json() -> RequestTemplate:
    return (
        _builtin(
            "POST JSON",
            "A POST request with a JSON body for creating resources",
            TemplateCategory.API,
            HttpMethod.POST,
            "{{base_url}}/{{path}}",
        )
        .with_header("Content-Type", "application/json")
        .with_header("Accept", "application/json")
        .with_body(RawBody(content='{\n  "key": "{{value}}"\n}', content_type=RawContentType.JSON))
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(_var("key", "The JSON key name"))
        .with_variable(_var("value", "The JSON value"))
    )


def _put_update() -> RequestTemplate:
    return (
        _builtin(
            "PUT Update",
            "A PUT request for updating existing resources",
            TemplateCategory.API,
            HttpMethod.PUT,
            "{{base_url}}/{{path}}/{{resource_id}}",
        )
        .with_header("Content-Type", "application/json")
        .with_header("Accept", "application/json")
        .with_body(
            RawBody(
                content='{\n  "id": "{{resource_id}}",\n  "field": "{{updated_value}}"\n}',
                content_type=RawContentType.JSON,
            )
        )
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(_var("resource_id", "The ID of the resource to update"))
        .with_variable(_var("updated_value", "The new value for the field"))
    )


def _delete_resource() -> RequestTemplate:
    return (
        _builtin(
            "DELETE Resource",
            "A DELETE request for removing resources",
            TemplateCategory.API,
            HttpMethod.DELETE,
            "{{base_url}}/{{path}}/{{resource_id}}",
        )
        .with_header("Authorization", "Bearer {{access_token}}")
        .with_header("Accept", "application/json")
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(_var("resource_id", "The ID of the resource to delete"))
        .with_variable(ACCESS_TOKEN)
    )


def _oauth2_password_flow() -> RequestTemplate:
    fields = [
        KeyValuePair(key="grant_type", value="password", description="OAuth2 grant type"),
        KeyValuePair(key="client_id", value="{{client_id}}", description="OAuth2 client ID"),
        KeyValuePair(key="client_secret", value="{{client_secret}}", description="OAuth2 client secret"),
        KeyValuePair(key="username", value="{{username}}", description="User username"),
        KeyValuePair(key="password", value="{{password}}", description="User password"),
    ]
    return (
        _builtin(
            "OAuth2 Password Flow",
            "OAuth2 authentication using password grant type",
            TemplateCategory.AUTHENTICATION,
            HttpMethod.POST,
            "{{auth_url}}/oauth/token",
        )
        .with_header("Content-Type", "application/x-www-form-urlencoded")
        .with_header("Accept", "application/json")
        .with_body(FormUrlEncodedBody(fields=fields))
        .with_variable(_var("auth_url", "The authentication server URL"))
        .with_variable(_var("client_id", "OAuth2 client ID"))
        .with_variable(_var("client_secret", "OAuth2 client secret"))
        .with_variable(_var("username", "Username"))
        .with_variable(_var("password", "Password"))
    )


def _get_with_pagination() -> RequestTemplate:
    return (
        _builtin(
            "GET with Pagination",
            "A GET request with pagination query parameters",
            TemplateCategory.API,
            HttpMethod.GET,
            "{{base_url}}/{{path}}",
        )
        .with_header("Accept", "application/json")
        .with_query_param("page", "{{page}}")
        .with_query_param("per_page", "{{per_page}}")
        .with_query_param("sort", "{{sort_field}}")
        .with_query_param("order", "{{order}}")
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(_var("page", "Page number").with_default("1"))
        .with_variable(_var("per_page", "Items per page").with_default("10"))
        .with_variable(_var("sort_field", "Field to sort by"))
        .with_variable(_var("order", "Sort order").with_default("asc"))
    )


def _post_form_data() -> RequestTemplate:
    fields = [
        KeyValuePair(key="field1", value="{{value1}}", description="First form field"),
        KeyValuePair(key="field2", value="{{value2}}", description="Second form field"),
    ]
    return (
        _builtin(
            "POST Form Data",
            "A POST request with form-encoded data",
            TemplateCategory.BASIC,
            HttpMethod.POST,
            "{{base_url}}/{{path}}",
        )
        .with_header("Content-Type", "application/x-www-form-urlencoded")
        .with_header("Accept", "application/json")
        .with_body(FormUrlEncodedBody(fields=fields))
        .with_variable(BASE_URL)
        .with_variable(PATH)
        .with_variable(_var("value1", "Value for field1"))
        .with_variable(_var("value2", "Value for field2"))
    )


def _graphql_query() -> RequestTemplate:
    return (
        _builtin(
            "GraphQL Query",
            "A POST request with a GraphQL query",
            TemplateCategory.API,
            HttpMethod.POST,
            "{{graphql_url}}",
        )
        .with_header("Content-Type", "application/json")
        .with_header("Accept", "application/json")
        .with_body(
            RawBody(
                content='{\n  "query": "{{query}}",\n  "variables": {{variables}}\n}',
                content_type=RawContentType.JSON,
            )
        )
        .with_variable(_var("graphql_url", "The GraphQL endpoint URL"))
        .with_variable(_var("query", "The GraphQL query"))
        .with_variable(_var("variables", "JSON object with query variables").with_default("{}"))
    )


def get_builtin_templates() -> Tuple[RequestTemplate, ...]:
    """The eight templates shipped with ReqForge, in display order."""
    return (
        _get_with_auth(),
        _post_json(),
        _put_update(),
        _delete_resource(),
        _oauth2_password_flow(),
        _get_with_pagination(),
        _post_form_data(),
        _graphql_query(),
    )
