import json
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import requests

from reqforge import ReqForgeCore
from reqforge.models import Collection, Environment, HttpMethod, HttpResponse, KeyValuePair, RequestDefinition
from reqforge.processors.errors import CollectionImportError, ImportErrorKind
from reqforge.services.http_engine import HttpEngine, RequestValidationFailed, TransportError


@pytest.fixture
def core(tmp_path):
    core = ReqForgeCore.open(str(tmp_path / "workspace"), history_max_size=5)
    core.engine = MagicMock(spec=HttpEngine)
    core.engine.execute.return_value = HttpResponse(
        status=200, status_text="OK", body=b"{}", body_text="{}", size_bytes=2, elapsed=timedelta(milliseconds=12)
    )
    return core


def test_open_creates_an_empty_workspace(core):
    assert core.environments == []
    assert core.collections == []
    assert core.history_is_empty()
    assert len(core.template_manager.get_all_templates()) == 8
    assert core.active_environment() is None
    assert core.active_vars() == {}


def test_active_environment_selection(core, staging_environment):
    core.add_environment(staging_environment)

    core.set_active_environment(staging_environment.id)

    assert core.active_environment_name() == "Staging"
    assert core.active_vars() == {"base_url": "https://staging.example.com", "token": "s3cret"}

    with pytest.raises(KeyError):
        core.set_active_environment(Environment(name="Other").id)

    core.set_active_environment(None)
    assert core.active_vars() == {}


def test_execute_resolves_and_records_unresolved_request(core, post_request, staging_environment):
    core.add_environment(staging_environment)
    core.set_active_environment(staging_environment.id)

    response = core.execute_request(post_request)

    sent = core.engine.execute.call_args.args[0]
    assert response.status == 200
    assert sent.url == "https://staging.example.com/users"
    assert sent.headers[0].value == "Bearer s3cret"

    entry = core.get_recent_history(1)[0]
    assert entry.request.url == "{{base_url}}/users"
    assert entry.response.status == 200
    assert entry.response.elapsed_millis == 12
    assert entry.response.success
    assert entry.environment_id == staging_environment.id
    assert entry.environment_name == "Staging"


def test_failed_execution_is_recorded_and_reraised(core, post_request):
    core.engine.execute.side_effect = TransportError("Request error: connection refused")

    with pytest.raises(TransportError):
        core.execute_request(post_request)

    entry = core.get_all_history()[0]
    assert entry.response.status == 0
    assert entry.response.status_text == "Error"
    assert not entry.response.success
    assert core.history_len() == 1


def test_non_ascii_header_is_rejected_and_recorded(core):
    session = MagicMock(spec=requests.Session)
    core.engine = HttpEngine(session=session)
    request = RequestDefinition(
        name="Note", method=HttpMethod.GET, url="https://x.io/notes", headers=[KeyValuePair(key="X-Note", value="café ☕")]
    )

    with pytest.raises(RequestValidationFailed, match="non-ASCII"):
        core.execute_request(request)

    session.request.assert_not_called()
    assert core.history_len() == 1
    assert core.get_all_history()[0].response.status == 0


def test_history_is_bounded_by_configuration(core):
    for i in range(7):
        core.execute_request(RequestDefinition.new(f"r{i}", HttpMethod.GET, "https://x.io"))

    assert core.history_len() == 5
    assert core.get_recent_history(1)[0].request.name == "r6"

    core.clear_history()
    assert core.history_is_empty()


def test_replay_uses_the_environment_active_now(core, staging_environment):
    core.execute_request(RequestDefinition.new("ping", HttpMethod.GET, "{{base_url}}/ping"))
    entry_id = core.get_recent_history(1)[0].id
    core.add_environment(staging_environment)
    core.set_active_environment(staging_environment.id)

    core.replay_history(entry_id)

    assert core.engine.execute.call_args.args[0].url == "https://staging.example.com/ping"
    assert core.history_len() == 1


def test_delete_collection_removes_file_and_memory(core):
    collection = Collection(name="Temp")
    core.add_collection(collection)
    core.save_all()

    core.delete_collection(collection.id)

    assert core.get_collection(collection.id) is None
    assert core.store.list_collections() == []


def test_save_all_then_reopen(core, post_request, staging_environment):
    collection = Collection(name="Users")
    collection.add_request(post_request)
    core.add_collection(collection)
    core.add_environment(staging_environment)
    core.execute_request(post_request)

    core.save_all()
    reopened = ReqForgeCore.open(core.store.root)

    assert reopened.get_collection(collection.id) == collection
    assert reopened.environments == [staging_environment]
    assert reopened.history_len() == 1
    assert reopened.get_all_history()[0].request == post_request


def test_import_postman_file(core, tmp_path):
    path = tmp_path / "postman.json"
    path.write_text(
        json.dumps(
            {
                "info": {"name": "Imported"},
                "item": [{"name": "Ping", "request": {"method": "GET", "url": "https://x.io/ping"}}],
            }
        ),
        encoding="utf-8",
    )

    imported = core.import_file(str(path))

    assert [c.name for c in imported] == ["Imported"]
    assert core.collections == imported


def test_import_unrecognized_file(core, tmp_path):
    path = tmp_path / "random.json"
    path.write_text(json.dumps({"hello": "world"}), encoding="utf-8")

    with pytest.raises(CollectionImportError) as exc_info:
        core.import_file(str(path))

    assert exc_info.value.kind == ImportErrorKind.INVALID_FORMAT
    assert core.collections == []


def test_failed_import_leaves_workspace_untouched(core, tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps({"openapi": "3.0.0", "paths": {}}), encoding="utf-8")

    with pytest.raises(CollectionImportError):
        core.import_file(str(path))

    assert core.collections == []


def test_export_and_import_workspace_archive(core, tmp_path, staging_environment):
    core.add_collection(Collection(name="Users"))
    core.add_environment(staging_environment)
    archive = str(tmp_path / "backup.zip")

    core.export_workspace(archive)
    fresh = ReqForgeCore.open(str(tmp_path / "other"))
    imported = fresh.import_file(archive)

    assert [c.name for c in imported] == ["Users"]
    assert fresh.environments == [staging_environment]
