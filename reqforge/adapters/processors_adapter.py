from dependency_injector import containers, providers

from ..processors.archive_processor import ArchiveProcessor
from ..processors.native_processor import NativeProcessor
from ..processors.postman_processor import PostmanProcessor
from ..processors.swagger import APIDefinitionLoader
from ..processors.swagger_processor import SwaggerProcessor


class ProcessorsAdapter(containers.DeclarativeContainer):
    """Adapter for processor components."""

    api_definition_loader = providers.Factory(APIDefinitionLoader)

    native_processor = providers.Factory(NativeProcessor, api_definition_loader=api_definition_loader)
    swagger_processor = providers.Factory(SwaggerProcessor, api_definition_loader=api_definition_loader)
    postman_processor = providers.Factory(PostmanProcessor, api_definition_loader=api_definition_loader)
    archive_processor = providers.Factory(ArchiveProcessor, native_processor=native_processor)
