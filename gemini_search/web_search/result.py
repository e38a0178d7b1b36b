from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class FetchResult:
    url: str
    content: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class StructuredSearchResult:
    results: List[Dict[str, Any]] = field(default_factory=list)
    summary: str = ""
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        if payload["error"] is None:
            payload.pop("error")
        return payload
