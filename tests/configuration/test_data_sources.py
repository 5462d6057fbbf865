import json
import zipfile

import pytest
from dependency_injector import containers, providers

from reqforge.configuration.config import Config, Envs
from reqforge.configuration.data_sources import DataSource, get_processor_for_data_source
from reqforge.container import Container
from reqforge.processors.api_processor import APIProcessor
from reqforge.processors.archive_processor import ArchiveProcessor
from reqforge.processors.native_processor import NativeProcessor
from reqforge.processors.postman_processor import PostmanProcessor
from reqforge.processors.swagger_processor import SwaggerProcessor


def _create_container(tmp_path) -> Container:
    config_adapter = containers.DynamicContainer()
    config_adapter.config = providers.Object(Config(workspace_dir=str(tmp_path), env=Envs.DEV))
    container = Container(config_adapter=config_adapter)
    return container


def test_get_processor_for_swagger(tmp_path):
    container = _create_container(tmp_path)
    processor = get_processor_for_data_source(DataSource.SWAGGER, container)
    assert isinstance(processor, SwaggerProcessor)


def test_get_processor_for_postman(tmp_path):
    container = _create_container(tmp_path)
    processor = get_processor_for_data_source(DataSource.POSTMAN, container)
    assert isinstance(processor, PostmanProcessor)


def test_get_processor_for_native_and_archive(tmp_path):
    container = _create_container(tmp_path)
    assert isinstance(get_processor_for_data_source(DataSource.NATIVE, container), NativeProcessor)
    assert isinstance(get_processor_for_data_source(DataSource.ARCHIVE, container), ArchiveProcessor)


def test_get_processor_for_unsupported_value(tmp_path):
    container = _create_container(tmp_path)
    with pytest.raises(ValueError):
        get_processor_for_data_source(DataSource.NONE, container)


def test_container_core_is_a_singleton_bound_to_the_workspace(tmp_path):
    container = _create_container(tmp_path)
    core = container.core()
    assert core is container.core()
    assert core.store.root == str(tmp_path)
    assert core.history.max_size == 100


@pytest.mark.parametrize(
    "content, expected",
    [
        ({"openapi": "3.0.0", "info": {}, "paths": {}}, DataSource.SWAGGER),
        ({"swagger": "2.0", "info": {}, "paths": {}}, DataSource.SWAGGER),
        ({"info": {"name": "C"}, "item": []}, DataSource.POSTMAN),
        ({"id": "x", "name": "C", "tree": [], "requests": {}}, DataSource.NATIVE),
        ({"something": "else"}, DataSource.NONE),
    ],
)
def test_set_data_source_detects_json_documents(tmp_path, content, expected):
    """Test that the document shape decides the data source."""
    path = tmp_path / "doc.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    assert APIProcessor.set_data_source(str(path)) == expected


def test_set_data_source_detects_yaml_urls_and_archives(tmp_path):
    archive = tmp_path / "workspace.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("manifest.json", "{}")

    assert APIProcessor.set_data_source(str(archive)) == DataSource.ARCHIVE
    assert APIProcessor.set_data_source("openapi.yaml") == DataSource.SWAGGER
    assert APIProcessor.set_data_source("https://example.com/openapi.json") == DataSource.SWAGGER


def test_set_data_source_reads_local_file_named_like_a_scheme(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "http_collection.json").write_text(
        json.dumps({"info": {"name": "C"}, "item": []}), encoding="utf-8"
    )

    assert APIProcessor.set_data_source("http_collection.json") == DataSource.POSTMAN


def test_set_data_source_missing_file_is_none(tmp_path):
    assert APIProcessor.set_data_source(str(tmp_path / "missing.json")) == DataSource.NONE
