from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from ...models.collection import Collection
from ...models.environment import Environment
from ...models.request import utc_now

MANIFEST_VERSION = "1.0"


class WorkspaceManifest(BaseModel):
    """Archive header; informational only, the version is not enforced on import."""

    version: str = MANIFEST_VERSION
    exported_at: datetime = Field(default_factory=utc_now)
    collection_count: int = 0
    environment_count: int = 0


@dataclass
class WorkspaceImport:
    """Everything read back from an archive; persisting it is up to the caller."""

    collections: List[Collection] = field(default_factory=list)
    environments: List[Environment] = field(default_factory=list)
