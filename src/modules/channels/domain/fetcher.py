"""Fetcher domain interfaces and models."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.modules.channels.domain.categories import CategoryTable
from src.modules.channels.domain.entities import ChannelEntry, ChannelSource

FetchedGroups = dict[str, list[ChannelEntry]]


class FetchStatus(str, Enum):
    """抓取状态枚举。"""

    SUCCESS = "success"
    PARTIAL = "partial"  # 部分分类失败
    FAILED = "failed"
    EMPTY = "empty"  # 成功但无数据
    SKIPPED = "skipped"  # 缺少凭证，主动跳过


@dataclass
class FetchResult:
    """抓取结果封装。

    groups 的键对 playlist 源是 group-title，对 API 源是分类名。
    errors 记录单个键的失败原因，用于区分“没有数据”和“请求失败”。
    """

    source: ChannelSource
    status: FetchStatus
    groups: FetchedGroups = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    error_message: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """是否成功（包含部分成功与空结果）。"""
        return self.status in (
            FetchStatus.SUCCESS,
            FetchStatus.PARTIAL,
            FetchStatus.EMPTY,
        )

    @property
    def items_count(self) -> int:
        return sum(len(entries) for entries in self.groups.values())

    @classmethod
    def success(
        cls,
        source: ChannelSource,
        groups: FetchedGroups,
        errors: dict[str, str] | None = None,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult":
        """创建成功结果；有键级错误时为部分成功，所有键都失败时为失败。"""
        errors = errors or {}
        if errors and not groups:
            status = FetchStatus.FAILED
        elif errors:
            status = FetchStatus.PARTIAL
        elif not any(groups.values()):
            status = FetchStatus.EMPTY
        else:
            status = FetchStatus.SUCCESS
        return cls(
            source=source,
            status=status,
            groups=groups,
            errors=errors,
            error_message="; ".join(f"{k}: {v}" for k, v in errors.items()) or None,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    @classmethod
    def failed(
        cls,
        source: ChannelSource,
        error_message: str,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult":
        """创建失败结果。"""
        return cls(
            source=source,
            status=FetchStatus.FAILED,
            error_message=error_message,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    @classmethod
    def skipped(cls, source: ChannelSource, reason: str) -> "FetchResult":
        """创建跳过结果。"""
        return cls(source=source, status=FetchStatus.SKIPPED, error_message=reason)


class BaseFetcher(ABC):
    """抓取器基类。

    每个抓取器把一个外部数据源转换成 “分组键 -> 条目列表” 的映射，
    任何网络或解析错误都在内部消化为 FetchResult，不向外抛出。
    """

    source: ChannelSource

    def __init__(self, categories: CategoryTable, max_items: int = 8):
        self.categories = categories
        self.max_items = max_items

    @abstractmethod
    async def fetch(self) -> FetchResult: ...

    @abstractmethod
    def validate_config(self) -> tuple[bool, str | None]: ...

    @staticmethod
    def _truncate(text: Any, max_length: int) -> str:
        if not text or not isinstance(text, str):
            return ""
        return text[:max_length]
