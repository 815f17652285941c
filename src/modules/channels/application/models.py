"""Application-level models for the channel build."""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from src.modules.channels.domain.entities import ChannelsDocument, ChannelSource
from src.modules.channels.domain.fetcher import FetchResult


class BuildStage(StrEnum):
    """构建流程阶段：fetching -> merging -> writing | reporting。"""

    PENDING = "pending"
    FETCHING = "fetching"
    MERGING = "merging"
    WRITING = "writing"
    REPORTING = "reporting"


@dataclass
class BuildReport:
    """一次构建运行的结果。"""

    stage: BuildStage
    dry_run: bool
    channels: ChannelsDocument
    url_history: list[str]
    fetch_results: dict[ChannelSource, FetchResult] = field(default_factory=dict)
    written: list[Path] = field(default_factory=list)

    @property
    def total_channels(self) -> int:
        return self.channels.total_channels

    def sample(self, category: str = "news", limit: int = 2) -> list[dict]:
        """First few entries of a category, as written to channels.json."""
        entries = self.channels.categories.get(category) or []
        return [entry.to_dict() for entry in entries[:limit]]
