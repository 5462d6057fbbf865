import uuid

import pytest
from pydantic import ValidationError

from reqforge.models import (
    FormUrlEncodedBody,
    HttpMethod,
    KeyValuePair,
    RawBody,
    RequestTemplate,
    TemplateCategory,
    TemplateVariable,
)
from reqforge.services.template_service import (
    CannotModifyBuiltinError,
    MissingVariablesError,
    TemplateManager,
    TemplateNotFoundError,
)
from reqforge.templates.builtin import get_builtin_templates

BUILTIN_NAMES = [
    "GET with Auth",
    "POST JSON",
    "PUT Update",
    "DELETE Resource",
    "OAuth2 Password Flow",
    "GET with Pagination",
    "POST Form Data",
    "GraphQL Query",
]


@pytest.fixture
def manager(store):
    return TemplateManager(store)


def _custom_template() -> RequestTemplate:
    return (
        RequestTemplate(
            name="Health",
            category=TemplateCategory.TESTING,
            method=HttpMethod.GET,
            url_template="{{host}}/health",
        )
        .with_header("X-Env", "{{env}}")
        .with_variable(TemplateVariable(name="host"))
        .with_variable(TemplateVariable(name="env").optional())
    )


def test_builtin_templates_are_present_with_stable_ids(manager):
    assert [t.name for t in manager.get_all_templates()] == BUILTIN_NAMES
    assert [t.id for t in get_builtin_templates()] == [t.id for t in get_builtin_templates()]
    assert all(manager.is_builtin(t.id) for t in manager.get_all_templates())


def test_builtin_templates_cannot_be_changed_through_lookups(manager):
    template = manager.get_template_by_name("GET with Auth")
    original_headers = list(template.headers)

    with pytest.raises(ValidationError):
        template.url_template = "https://evil.example.com"
    template.headers.append(KeyValuePair(key="X-Injected", value="1"))

    fresh = manager.get_template(template.id)
    assert fresh.url_template != "https://evil.example.com"
    assert fresh.headers == original_headers


def test_templates_by_category(manager):
    grouped = manager.get_templates_by_category()
    assert {t.name for t in grouped[TemplateCategory.AUTHENTICATION]} == {"GET with Auth", "OAuth2 Password Flow"}
    assert [t.name for t in grouped[TemplateCategory.BASIC]] == ["POST Form Data"]
    assert str(TemplateCategory.API) == "API"


def test_create_from_template_substitutes_and_applies_defaults(manager):
    template = manager.get_template_by_name("GET with Pagination")

    result = manager.create_from_template(
        template.id,
        {"base_url": "https://api.example.com", "path": "items", "sort_field": "name"},
        "List items",
    )

    request = result.request
    assert result.missing_variables == []
    assert result.is_complete
    assert request.name == "List items"
    assert request.method == HttpMethod.GET
    assert request.url == "https://api.example.com/items"
    assert [(p.key, p.value) for p in request.query_params] == [
        ("page", "1"),
        ("per_page", "10"),
        ("sort", "name"),
        ("order", "asc"),
    ]


def test_provided_values_win_over_defaults(manager):
    template = manager.get_template_by_name("GET with Auth")

    result = manager.create_from_template(
        template.id, {"base_url": "https://x.io", "path": "me", "access_token": "real"}, "Me"
    )

    assert result.request.headers[0].value == "Bearer real"


def test_missing_required_variables_are_reported_not_raised(manager):
    template = manager.get_template_by_name("POST JSON")

    result = manager.create_from_template(template.id, {"base_url": "https://x.io"}, "Create")

    assert result.missing_variables == ["path", "key", "value"]
    assert result.request.url == "https://x.io/{{path}}"
    assert isinstance(result.request.body, RawBody)
    assert result.request.body.content == '{\n  "key": "{{value}}"\n}'


def test_form_template_substitutes_field_values(manager):
    template = manager.get_template_by_name("OAuth2 Password Flow")

    result = manager.create_from_template(
        template.id,
        {"auth_url": "https://auth.io", "client_id": "c", "client_secret": "s", "username": "u", "password": "p"},
        "Login",
    )

    assert result.request.url == "https://auth.io/oauth/token"
    assert isinstance(result.request.body, FormUrlEncodedBody)
    assert [(f.key, f.value) for f in result.request.body.fields] == [
        ("grant_type", "password"),
        ("client_id", "c"),
        ("client_secret", "s"),
        ("username", "u"),
        ("password", "p"),
    ]


def test_create_from_unknown_template(manager):
    with pytest.raises(TemplateNotFoundError):
        manager.create_from_template(uuid.uuid4(), {}, "x")


def test_validate_template_variables(manager):
    template = manager.get_template_by_name("GraphQL Query")

    manager.validate_template_variables(template.id, {"graphql_url": "https://x.io/graphql", "query": "{ me }"})
    with pytest.raises(MissingVariablesError) as exc_info:
        manager.validate_template_variables(template.id, {})
    assert exc_info.value.missing == ["graphql_url", "query"]


def test_builtin_templates_cannot_be_modified(manager):
    builtin = manager.get_template_by_name("DELETE Resource")

    with pytest.raises(CannotModifyBuiltinError):
        manager.delete_custom_template(builtin.id)
    with pytest.raises(CannotModifyBuiltinError):
        manager.update_custom_template(builtin.model_copy(update={"name": "Hacked"}))
    with pytest.raises(CannotModifyBuiltinError):
        manager.add_custom_template(builtin)

    assert manager.get_template(builtin.id).name == "DELETE Resource"


def test_custom_templates_crud_and_persistence(manager, store):
    custom = _custom_template()
    manager.add_custom_template(custom)
    manager.update_custom_template(custom.model_copy(update={"description": "Liveness check"}))
    manager.save_custom_templates()

    reloaded = TemplateManager(store)
    reloaded.load_custom_templates()

    assert reloaded.get_template(custom.id).description == "Liveness check"
    assert not reloaded.is_builtin(custom.id)
    assert len(reloaded.get_all_templates()) == len(BUILTIN_NAMES) + 1

    reloaded.delete_custom_template(custom.id)
    assert reloaded.get_template(custom.id) is None


def test_update_unknown_custom_template(manager):
    with pytest.raises(TemplateNotFoundError):
        manager.update_custom_template(_custom_template())
