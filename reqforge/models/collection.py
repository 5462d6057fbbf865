import uuid
from typing import Annotated, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .request import RequestDefinition


class RequestRef(BaseModel):
    """Tree leaf pointing at an entry of ``Collection.requests``."""

    type: Literal["Request"] = "Request"
    id: uuid.UUID


class Folder(BaseModel):
    type: Literal["Folder"] = "Folder"
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    children: List["CollectionItem"] = Field(default_factory=list)


CollectionItem = Annotated[Union[RequestRef, Folder], Field(discriminator="type")]

Folder.model_rebuild()


class Collection(BaseModel):
    """
    An ordered tree of folders/requests plus a flat lookup table.

    The ``requests`` map is the sole owner of the request definitions; the tree
    only holds references by id so lookups stay independent of tree depth.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    tree: List[CollectionItem] = Field(default_factory=list)
    requests: Dict[uuid.UUID, RequestDefinition] = Field(default_factory=dict)

    def add_request(self, request: RequestDefinition, parent_folder: Optional[uuid.UUID] = None) -> None:
        """
        Register a request and reference it from the tree.

        Args:
            request: The request to own.
            parent_folder: Folder to append the reference to; the root when omitted.

        Raises:
            KeyError: if ``parent_folder`` is not part of this collection.
        """
        children = self._children_of(parent_folder)
        self.requests[request.id] = request
        children.append(RequestRef(id=request.id))

    def add_folder(self, name: str, parent_folder: Optional[uuid.UUID] = None) -> Folder:
        children = self._children_of(parent_folder)
        folder = Folder(name=name)
        children.append(folder)
        return folder

    def find_folder(self, folder_id: uuid.UUID) -> Optional[Folder]:
        return self._find_folder(self.tree, folder_id)

    def remove_request(self, request_id: uuid.UUID) -> Optional[RequestDefinition]:
        """Drop a request from both the lookup table and every tree reference."""
        removed = self.requests.pop(request_id, None)
        self._prune(self.tree, request_id)
        return removed

    def iter_request_ids(self) -> Iterator[uuid.UUID]:
        """Depth-first walk over every request reference in the tree."""
        yield from self._walk(self.tree)

    def _children_of(self, parent_folder: Optional[uuid.UUID]) -> List[CollectionItem]:
        if parent_folder is None:
            return self.tree
        folder = self.find_folder(parent_folder)
        if folder is None:
            raise KeyError(f"Folder {parent_folder} not found in collection '{self.name}'")
        return folder.children

    @classmethod
    def _find_folder(cls, items: List[CollectionItem], folder_id: uuid.UUID) -> Optional[Folder]:
        for item in items:
            if isinstance(item, Folder):
                if item.id == folder_id:
                    return item
                found = cls._find_folder(item.children, folder_id)
                if found is not None:
                    return found
        return None

    @classmethod
    def _prune(cls, items: List[CollectionItem], request_id: uuid.UUID) -> None:
        items[:] = [item for item in items if not (isinstance(item, RequestRef) and item.id == request_id)]
        for item in items:
            if isinstance(item, Folder):
                cls._prune(item.children, request_id)

    @classmethod
    def _walk(cls, items: List[CollectionItem]) -> Iterator[uuid.UUID]:
        for item in items:
            match item:
                case RequestRef(id=request_id):
                    yield request_id
                case Folder(children=children):
                    yield from cls._walk(children)
