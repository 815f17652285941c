"""Merge all channel sources into the channels.json document."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.channels.domain.categories import CategoryTable
from src.modules.channels.domain.entities import (
    ChannelEntry,
    ChannelsDocument,
    ChannelSource,
)

ChannelMapping = Mapping[str, list[ChannelEntry]]


class MergeService:
    """按固定来源优先级合并各分类条目并按 URL 去重。

    优先级：iptv-org -> YouTube -> TMDB -> custom -> user，去重时先出现者保留。
    """

    def __init__(
        self,
        categories: CategoryTable,
        *,
        group_cap: int = 15,
        version: str = "1.0",
    ) -> None:
        self.categories = categories
        self.group_cap = group_cap
        self.version = version

    def merge(
        self,
        iptv_by_group: ChannelMapping,
        youtube_by_category: ChannelMapping,
        tmdb_by_category: ChannelMapping,
        custom: Mapping[str, Any],
        user: Mapping[str, Any],
        *,
        now: datetime | None = None,
    ) -> ChannelsDocument:
        """Build the output document from the five sources."""
        merged: dict[str, list[ChannelEntry]] = {}

        for category, descriptor in self.categories.items():
            candidates: list[ChannelEntry] = []

            # cap 作用于每个 group 的贡献，而不是分类总数
            for group in descriptor.iptv_groups:
                streams = iptv_by_group.get(group) or []
                candidates.extend(
                    entry.in_category(category) for entry in streams[: self.group_cap]
                )

            candidates.extend(
                entry.in_category(category)
                for entry in youtube_by_category.get(category) or []
            )
            candidates.extend(
                entry.in_category(category)
                for entry in tmdb_by_category.get(category) or []
            )
            candidates.extend(
                self._local_entries(custom, category, ChannelSource.CUSTOM)
            )
            candidates.extend(self._local_entries(user, category, ChannelSource.USER))

            deduped = self.dedupe_by_url(candidates)
            merged[category] = deduped

            logger.info(f"  [{category}]: {len(deduped)} total channels")
            BusinessEvents.category_merged(
                category=category,
                candidates=len(candidates),
                total=len(deduped),
            )

        return ChannelsDocument(
            updated=ChannelsDocument.timestamp(now),
            version=self.version,
            categories=merged,
        )

    @staticmethod
    def dedupe_by_url(entries: Iterable[ChannelEntry]) -> list[ChannelEntry]:
        """Keep the first entry per URL, dropping entries without a URL."""
        seen: set[str] = set()
        deduped: list[ChannelEntry] = []
        for entry in entries:
            if not entry.url or entry.url in seen:
                continue
            seen.add(entry.url)
            deduped.append(entry)
        return deduped

    @staticmethod
    def _local_entries(
        overrides: Mapping[str, Any],
        category: str,
        source: ChannelSource,
    ) -> list[ChannelEntry]:
        """Turn partial local records into entries with forced source and category.

        记录内容原样保留（包括 null 与未知字段）；只有非对象记录和 url 不是字符串的
        记录无法成为条目，后者与缺少 url 的条目同样会在去重时被丢弃。
        """
        records = overrides.get(category) or []
        if not isinstance(records, list):
            logger.warning(
                f"Ignoring {source.value} entries for [{category}]: expected a list"
            )
            return []

        entries: list[ChannelEntry] = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning(
                    f"Ignoring {source.value} entry #{index} in [{category}]: "
                    "not an object"
                )
                continue
            try:
                entries.append(
                    ChannelEntry.model_validate(
                        {**record, "category": category, "source": source}
                    )
                )
            except ValueError:
                logger.warning(
                    f"Ignoring {source.value} entry #{index} in [{category}]: "
                    "url is not a string"
                )
        return entries
