import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .request import RequestDefinition, utc_now
from .response import HttpResponse


class ResponseSnapshot(BaseModel):
    """The part of a response worth keeping in history (no body, no headers)."""

    status: int
    status_text: str
    size_bytes: int = 0
    elapsed_millis: int = 0
    success: bool = False

    @classmethod
    def from_response(cls, response: HttpResponse) -> "ResponseSnapshot":
        return cls(
            status=response.status,
            status_text=response.status_text,
            size_bytes=response.size_bytes,
            elapsed_millis=response.elapsed_millis,
            success=response.is_success(),
        )

    @classmethod
    def failed(cls) -> "ResponseSnapshot":
        """Snapshot recorded when the request never produced a response."""
        return cls(status=0, status_text="Error")


class RequestHistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    request: RequestDefinition
    response: ResponseSnapshot
    timestamp: datetime = Field(default_factory=utc_now)
    environment_id: Optional[uuid.UUID] = None
    environment_name: Optional[str] = None

    @classmethod
    def new(
        cls,
        request: RequestDefinition,
        response: ResponseSnapshot,
        environment_id: Optional[uuid.UUID] = None,
        environment_name: Optional[str] = None,
    ) -> "RequestHistoryEntry":
        # Snapshot the request so later edits to the original don't leak into history
        return cls(
            request=request.model_copy(deep=True),
            response=response,
            environment_id=environment_id,
            environment_name=environment_name,
        )
