from dependency_injector import containers, providers

from .adapters.processors_adapter import ProcessorsAdapter
from .core import ReqForgeCore
from .services.history_service import RequestHistory
from .services.http_engine import HttpEngine
from .services.json_store import JsonStore
from .services.template_service import TemplateManager


class Container(containers.DeclarativeContainer):
    """Root container wiring a workspace together."""

    config_adapter = providers.DependenciesContainer()
    processors_adapter = providers.Container(ProcessorsAdapter)

    config = config_adapter.config

    native_processor = processors_adapter.native_processor
    swagger_processor = processors_adapter.swagger_processor
    postman_processor = processors_adapter.postman_processor
    archive_processor = processors_adapter.archive_processor

    store = providers.Singleton(JsonStore, root=config.provided.workspace_dir)
    http_engine = providers.Singleton(HttpEngine)
    history = providers.Singleton(RequestHistory, store=store, max_size=config.provided.history_max_size)
    template_manager = providers.Singleton(TemplateManager, store=store)

    core = providers.Singleton(
        ReqForgeCore,
        store=store,
        engine=http_engine,
        history=history,
        template_manager=template_manager,
        processors=processors_adapter,
    )
