import json
from typing import Dict, Optional

import pytest
import requests

from reqforge.configuration.config import Config, Envs
from reqforge.models import Environment, HttpMethod, KeyValuePair, RawBody, RawContentType, RequestDefinition
from reqforge.services.json_store import JsonStore


@pytest.fixture
def temp_config(tmp_path):
    return Config(workspace_dir=str(tmp_path / "workspace"), env=Envs.DEV, log_folder=str(tmp_path / "logs"))


@pytest.fixture
def store(tmp_path):
    return JsonStore(str(tmp_path / "workspace"))


@pytest.fixture
def post_request():
    return RequestDefinition(
        name="Create user",
        method=HttpMethod.POST,
        url="{{base_url}}/users",
        headers=[KeyValuePair(key="Authorization", value="Bearer {{token}}")],
        query_params=[KeyValuePair(key="verbose", value="{{verbose}}")],
        body=RawBody(content='{"name": "{{user_name}}"}', content_type=RawContentType.JSON),
    )


@pytest.fixture
def staging_environment():
    environment = Environment(name="Staging")
    environment.add_variable("base_url", "https://staging.example.com")
    environment.add_variable("token", "s3cret", secret=True)
    environment.add_variable("user_name", "alice", enabled=False)
    return environment


def _make_response(
    status: int = 200,
    body: bytes | Dict = b"",
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a requests.Response the way the transport would hand it back."""
    response = requests.Response()
    response.status_code = status
    if isinstance(body, dict):
        body = json.dumps(body).encode("utf-8")
    response._content = body
    response.headers.update(headers or {})
    return response


@pytest.fixture
def make_response():
    return _make_response
