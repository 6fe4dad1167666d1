from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ResponseEntity:
    """Status, body and headers returned by controller methods."""

    status: int = 200
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls, body: Any = None, headers: Optional[Dict[str, str]] = None):
        return cls(200, body, headers or {})

    @classmethod
    def created(cls, body: Any = None, headers: Optional[Dict[str, str]] = None):
        return cls(201, body, headers or {})

    @classmethod
    def no_content(cls, headers: Optional[Dict[str, str]] = None):
        return cls(204, None, headers or {})
