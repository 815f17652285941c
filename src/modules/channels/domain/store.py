"""Local data store domain models and ports."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Protocol


class LoadStatus(str, Enum):
    """本地文件加载状态。"""

    LOADED = "loaded"
    MISSING = "missing"
    INVALID = "invalid"


@dataclass(frozen=True)
class LoadResult:
    """本地 JSON 文件加载结果。"""

    filename: str
    status: LoadStatus
    data: Any = None
    error_message: str | None = None

    @property
    def mapping(self) -> dict[str, Any]:
        """Parsed content as a mapping; anything else degrades to empty."""
        if self.status == LoadStatus.LOADED and isinstance(self.data, dict):
            return self.data
        return {}


class ChannelStore(Protocol):
    """Port for reading local overrides and writing output documents."""

    def load(self, filename: str) -> LoadResult: ...

    def write_json(self, filename: str, payload: Any) -> Path: ...
