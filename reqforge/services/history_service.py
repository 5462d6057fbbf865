import uuid
from collections import deque
from typing import Deque, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from ..configuration.config import DEFAULT_HISTORY_MAX_SIZE
from ..models.history import RequestHistoryEntry
from ..models.response import HttpResponse
from ..utils.logger import Logger
from .http_engine import HttpEngine, HttpError
from .interpolator import Interpolator
from .json_store import JsonStore, StoreError

HISTORY_FILE = "history.json"

_entry_list = TypeAdapter(List[RequestHistoryEntry])


class ReplayError(Exception):
    pass


class HistoryEntryNotFoundError(ReplayError):
    def __init__(self, entry_id: uuid.UUID):
        super().__init__(f"History entry not found: {entry_id}")
        self.entry_id = entry_id


class RequestHistory:
    """
    Bounded, most-recent-first log of executed requests.

    Changes are tracked with a dirty flag; ``save()`` only writes when
    something changed since the last load or save.
    """

    def __init__(self, store: JsonStore, max_size: int = DEFAULT_HISTORY_MAX_SIZE):
        self.store = store
        self.max_size = max_size
        self._entries: Deque[RequestHistoryEntry] = deque()
        self._dirty = False
        self.logger = Logger.get_logger(__name__)

    def load(self) -> None:
        """Replace the in-memory log with the persisted one, capped at ``max_size``."""
        data = self.store.read_json(HISTORY_FILE)
        if data is None:
            return
        try:
            loaded = _entry_list.validate_python(data)
        except ValidationError as e:
            self.logger.error(f"Error decoding {HISTORY_FILE}: {e}")
            raise StoreError(f"Serialization error: {e}") from e

        # The file is stored newest-first already
        self._entries = deque(loaded[: self.max_size])
        self._dirty = False
        self.logger.debug(f"Loaded {len(self._entries)} history entries")

    def save(self) -> None:
        if not self._dirty:
            return
        self.store.write_json(HISTORY_FILE, _entry_list.dump_python(list(self._entries), mode="json"))
        self._dirty = False
        self.logger.debug(f"Saved {len(self._entries)} history entries")

    def add_entry(self, entry: RequestHistoryEntry) -> None:
        self._entries.appendleft(entry)
        while len(self._entries) > self.max_size:
            self._entries.pop()
        self._dirty = True

    def get_all(self) -> List[RequestHistoryEntry]:
        return list(self._entries)

    def get_recent(self, count: int) -> List[RequestHistoryEntry]:
        return list(self._entries)[:count]

    def get_entry(self, entry_id: uuid.UUID) -> Optional[RequestHistoryEntry]:
        return next((entry for entry in self._entries if entry.id == entry_id), None)

    def clear(self) -> None:
        self._entries.clear()
        self._dirty = True

    def is_empty(self) -> bool:
        return not self._entries

    def is_dirty(self) -> bool:
        return self._dirty

    def __len__(self) -> int:
        return len(self._entries)

    def replay(self, entry_id: uuid.UUID, engine: HttpEngine, variables: Mapping[str, str]) -> HttpResponse:
        """
        Re-execute a recorded request against the *current* variables.

        Raises:
            HistoryEntryNotFoundError: if no entry has ``entry_id``.
            ReplayError: chained to the ``HttpError`` when execution fails.
        """
        entry = self.get_entry(entry_id)
        if entry is None:
            raise HistoryEntryNotFoundError(entry_id)

        resolved = Interpolator.resolve(entry.request, variables)
        try:
            return engine.execute(resolved)
        except HttpError as e:
            raise ReplayError(f"HTTP error: {e}") from e
