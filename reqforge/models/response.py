import json
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Optional


@dataclass
class HttpResponse:
    """Normalized response produced by the execution engine."""

    status: int
    status_text: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    body_text: Optional[str] = None
    size_bytes: int = 0
    elapsed: timedelta = field(default_factory=timedelta)

    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def elapsed_millis(self) -> int:
        return int(self.elapsed.total_seconds() * 1000)

    def pretty_body(self) -> Optional[str]:
        """Indented JSON rendition of the body, or None when it is not JSON."""
        if self.body_text is None:
            return None
        try:
            return json.dumps(json.loads(self.body_text), indent=2, ensure_ascii=False)
        except ValueError:
            return None
