"""Channel domain entities."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChannelSource(StrEnum):
    """条目来源标签（下游 Roku 客户端依赖这些字符串）。"""

    IPTV = "iptv-org"
    YOUTUBE = "youtube"
    TMDB = "tmdb"
    CUSTOM = "custom"
    USER = "user"


class ChannelType(StrEnum):
    """告诉客户端如何处理 URL 的类型提示。"""

    LIVE = "live"
    VOD = "vod"
    MP4 = "mp4"
    INFO = "info"


class ChannelEntry(BaseModel):
    """单个频道条目。

    本地覆盖文件中的条目可能缺字段、字段为 null 或带额外字段，按原样保留；
    序列化时只输出显式设置过的字段。
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    # 展示字段不做类型校验：本地文件里写什么就输出什么
    name: Any = Field(default="", description="显示名称")
    url: str | None = Field(default="", description="播放/详情 URL，条目唯一标识")
    logo: Any = Field(default="", description="Logo URL")
    desc: Any = Field(default="", description="描述")
    source: ChannelSource | None = Field(default=None, description="来源标签")
    type: Any = Field(default=None, description="类型提示（ChannelType 或本地自定义值）")
    category: str | None = Field(default=None, description="合并时分配的分类")

    # iptv-org playlist only
    id: Any = Field(default=None, description="tvg-id")
    group: Any = Field(default=None, description="group-title")

    def in_category(
        self, category: str, source: ChannelSource | None = None
    ) -> "ChannelEntry":
        """Return a copy tagged with a category (and optionally a forced source)."""
        update: dict[str, Any] = {"category": category}
        if source is not None:
            update["source"] = source
        return self.model_copy(update=update)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ChannelsDocument(BaseModel):
    """channels.json 输出文档（每次运行整体重建的快照）。"""

    updated: str
    version: str
    categories: dict[str, list[ChannelEntry]]

    @staticmethod
    def timestamp(now: datetime | None = None) -> str:
        """ISO-8601 UTC timestamp with millisecond precision and ``Z`` suffix."""
        now = now or datetime.now(UTC)
        return now.astimezone(UTC).isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        )

    @property
    def total_channels(self) -> int:
        return sum(len(entries) for entries in self.categories.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "updated": self.updated,
            "version": self.version,
            "categories": {
                name: [entry.to_dict() for entry in entries]
                for name, entries in self.categories.items()
            },
        }
