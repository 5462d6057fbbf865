import uuid
from typing import Dict, List, Optional

from .adapters.processors_adapter import ProcessorsAdapter
from .configuration.config import DEFAULT_HISTORY_MAX_SIZE
from .configuration.data_sources import DataSource, get_processor_for_data_source
from .models.collection import Collection
from .models.environment import Environment
from .models.history import RequestHistoryEntry, ResponseSnapshot
from .models.request import RequestDefinition
from .models.response import HttpResponse
from .processors.api_processor import APIProcessor
from .processors.archive.manifest import WorkspaceImport
from .processors.errors import CollectionImportError, ImportErrorKind
from .services.history_service import RequestHistory
from .services.http_engine import HttpEngine, HttpError
from .services.interpolator import Interpolator
from .services.json_store import JsonStore
from .services.template_service import TemplateManager
from .utils.logger import Logger


class ReqForgeCore:
    """
    Owns one workspace: its environments, collections, history and templates.

    Not safe for concurrent use; callers on multiple threads must serialize access.
    """

    def __init__(
        self,
        store: JsonStore,
        engine: HttpEngine,
        history: RequestHistory,
        template_manager: TemplateManager,
        processors: ProcessorsAdapter,
    ):
        self.store = store
        self.engine = engine
        self.history = history
        self.template_manager = template_manager
        self.processors = processors
        self.logger = Logger.get_logger(__name__)

        self.environments: List[Environment] = store.load_environments()
        self.collections: List[Collection] = store.list_collections()
        self.active_environment_id: Optional[uuid.UUID] = None
        self.history.load()
        self.template_manager.load_custom_templates()
        self.logger.debug(
            f"Opened workspace {store.root}: {len(self.environments)} environment(s), "
            f"{len(self.collections)} collection(s), {len(self.history)} history entries"
        )

    @classmethod
    def open(cls, workspace_dir: str, history_max_size: int = DEFAULT_HISTORY_MAX_SIZE) -> "ReqForgeCore":
        """Open (creating if needed) a workspace without a DI container."""
        store = JsonStore(workspace_dir)
        return cls(
            store=store,
            engine=HttpEngine(),
            history=RequestHistory(store, max_size=history_max_size),
            template_manager=TemplateManager(store),
            processors=ProcessorsAdapter(),
        )

    # Environments

    def active_environment(self) -> Optional[Environment]:
        if self.active_environment_id is None:
            return None
        return next((e for e in self.environments if e.id == self.active_environment_id), None)

    def active_vars(self) -> Dict[str, str]:
        environment = self.active_environment()
        return environment.to_map() if environment else {}

    def active_environment_name(self) -> Optional[str]:
        environment = self.active_environment()
        return environment.name if environment else None

    def set_active_environment(self, environment_id: Optional[uuid.UUID]) -> None:
        """
        Raises:
            KeyError: if ``environment_id`` is not one of this workspace's environments.
        """
        if environment_id is not None and not any(e.id == environment_id for e in self.environments):
            raise KeyError(f"Environment {environment_id} not found")
        self.active_environment_id = environment_id

    def add_environment(self, environment: Environment) -> None:
        self.environments.append(environment)

    # Execution

    def execute_request(self, request: RequestDefinition) -> HttpResponse:
        """
        Resolve ``request`` against the active environment, execute it and record
        the outcome in history, whether it succeeded or not.

        Raises:
            HttpError: when no response could be obtained (recorded as status 0).
        """
        resolved = Interpolator.resolve(request, self.active_vars())
        try:
            response = self.engine.execute(resolved)
        except HttpError:
            self._record(request, ResponseSnapshot.failed())
            raise
        self._record(request, ResponseSnapshot.from_response(response))
        return response

    def _record(self, request: RequestDefinition, snapshot: ResponseSnapshot) -> None:
        # The unresolved request is kept so replays pick up today's variables
        self.history.add_entry(
            RequestHistoryEntry.new(
                request,
                snapshot,
                environment_id=self.active_environment_id,
                environment_name=self.active_environment_name(),
            )
        )

    # History

    def get_recent_history(self, count: int) -> List[RequestHistoryEntry]:
        return self.history.get_recent(count)

    def get_all_history(self) -> List[RequestHistoryEntry]:
        return self.history.get_all()

    def clear_history(self) -> None:
        self.history.clear()

    def replay_history(self, entry_id: uuid.UUID) -> HttpResponse:
        return self.history.replay(entry_id, self.engine, self.active_vars())

    def history_len(self) -> int:
        return len(self.history)

    def history_is_empty(self) -> bool:
        return self.history.is_empty()

    # Collections

    def get_collection(self, collection_id: uuid.UUID) -> Optional[Collection]:
        return next((c for c in self.collections if c.id == collection_id), None)

    def add_collection(self, collection: Collection) -> None:
        self.collections.append(collection)

    def delete_collection(self, collection_id: uuid.UUID) -> None:
        """Drop the collection with all of its requests, on disk and in memory."""
        self.store.delete_collection(collection_id)
        self.collections = [c for c in self.collections if c.id != collection_id]

    # Import / export

    def import_file(self, path: str) -> List[Collection]:
        """
        Import any supported document, detecting its format.

        Archive imports also merge their environments. Nothing is added to the
        workspace unless the whole document imports cleanly.

        Returns:
            The imported collections.

        Raises:
            CollectionImportError: when the format is unknown or the import fails.
        """
        data_source = APIProcessor.set_data_source(path, self.logger)
        if data_source == DataSource.NONE:
            raise CollectionImportError(ImportErrorKind.INVALID_FORMAT, f"Unrecognized file format: {path}")

        processor = get_processor_for_data_source(data_source, self.processors)
        if data_source == DataSource.ARCHIVE:
            workspace: WorkspaceImport = processor.import_all(path)
            self.collections.extend(workspace.collections)
            self.environments.extend(workspace.environments)
            return workspace.collections

        collection = processor.process_api_definition(path)
        self.collections.append(collection)
        return [collection]

    def export_workspace(self, path: str) -> None:
        self.processors.archive_processor().export_all(self.collections, self.environments, path)

    def save_all(self) -> None:
        self.store.save_environments(self.environments)
        for collection in self.collections:
            self.store.save_collection(collection)
        self.history.save()
        self.template_manager.save_custom_templates()
