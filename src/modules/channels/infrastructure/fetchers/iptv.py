"""iptv-org M3U 抓取器实现。

index.m3u 包含所有频道及其 group-title 标签，直接在内存中用正则解析。
"""

import re
import time

import httpx
from loguru import logger

from src.core.config import settings
from src.modules.channels.domain.categories import CategoryTable
from src.modules.channels.domain.entities import (
    ChannelEntry,
    ChannelSource,
    ChannelType,
)
from src.modules.channels.domain.fetcher import FetchedGroups, FetchResult
from src.modules.channels.infrastructure.fetchers.base import HttpFetcher

GROUP_RE = re.compile(r'group-title="([^"]*)"', flags=re.IGNORECASE)
LOGO_RE = re.compile(r'tvg-logo="([^"]*)"', flags=re.IGNORECASE)
TVGID_RE = re.compile(r'tvg-id="([^"]*)"', flags=re.IGNORECASE)
NAME_RE = re.compile(r",(.+)$")

DEFAULT_GROUP = "General"


class IptvPlaylistFetcher(HttpFetcher):
    """iptv-org playlist 抓取器。

    输出按 group-title 分组，不依赖分类表；分组到分类的映射在合并阶段完成。
    """

    source = ChannelSource.IPTV

    def __init__(
        self,
        categories: CategoryTable,
        max_items: int | None = None,
        *,
        playlist_url: str | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            categories,
            settings.PLAYLIST_GROUP_CAP if max_items is None else max_items,
            timeout_sec=timeout_sec or settings.PLAYLIST_TIMEOUT_SEC,
            transport=transport,
        )
        self.playlist_url = playlist_url or settings.IPTV_PLAYLIST_URL

    def validate_config(self) -> tuple[bool, str | None]:
        if not self.playlist_url:
            return False, "Missing playlist_url"
        if not self.playlist_url.startswith(("http://", "https://")):
            return False, "playlist_url must be a valid HTTP(S) URL"
        return True, None

    async def fetch(self) -> FetchResult:
        """执行抓取。"""
        start_time = time.time()

        valid, error = self.validate_config()
        if not valid:
            return FetchResult.failed(self.source, error or "Invalid config")

        logger.info("Fetching iptv-org...")
        try:
            async with self._client() as client:
                response = await client.get(self.playlist_url)
                response.raise_for_status()
                text = response.text
        except httpx.TimeoutException as e:
            logger.warning(f"iptv-org fetch timeout for {self.playlist_url}: {e}")
            return FetchResult.failed(
                self.source,
                f"Timeout: {str(e)}",
                duration_ms=self._elapsed_ms(start_time),
            )
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"iptv-org fetch HTTP error for {self.playlist_url}: "
                f"{e.response.status_code}"
            )
            return FetchResult.failed(
                self.source,
                f"HTTP {e.response.status_code}",
                duration_ms=self._elapsed_ms(start_time),
            )
        except httpx.HTTPError as e:
            logger.warning(f"iptv-org fetch error for {self.playlist_url}: {e}")
            return FetchResult.failed(
                self.source,
                f"Error: {str(e)}",
                duration_ms=self._elapsed_ms(start_time),
            )

        groups = self.parse_playlist(text)
        total = sum(len(entries) for entries in groups.values())
        logger.info(f"  iptv-org: {len(groups)} groups, {total} channels")

        return FetchResult.success(
            self.source,
            groups,
            duration_ms=self._elapsed_ms(start_time),
            metadata={"playlist_url": self.playlist_url, "groups": len(groups)},
        )

    def parse_playlist(self, text: str) -> FetchedGroups:
        """解析 M3U 文本为 group-title -> 条目列表。

        #EXTINF 行声明一个条目，随后第一个以 http 开头的行提供播放地址；
        两者齐备才接受条目。中间的其它 # 行（如 #EXTVLCOPT）被忽略。
        """
        by_group: FetchedGroups = {}
        current: dict[str, str] | None = None

        for line in text.splitlines():
            trimmed = line.strip()
            if not trimmed:
                continue

            if trimmed.startswith("#EXTINF"):
                current = self._parse_extinf(trimmed)
                continue

            if current is None or not trimmed.startswith("http"):
                continue

            group = current["group"]
            entries = by_group.setdefault(group, [])
            if len(entries) < self.max_items:
                entries.append(
                    ChannelEntry(
                        name=current["name"],
                        logo=current["logo"],
                        id=current["id"],
                        group=group,
                        source=self.source,
                        type=ChannelType.LIVE,
                        url=trimmed,
                    )
                )
            current = None

        return by_group

    @staticmethod
    def _parse_extinf(line: str) -> dict[str, str]:
        group_match = GROUP_RE.search(line)
        name_match = NAME_RE.search(line)
        logo_match = LOGO_RE.search(line)
        id_match = TVGID_RE.search(line)

        group = group_match.group(1).strip() if group_match else ""
        return {
            "name": name_match.group(1).strip() if name_match else "Unknown",
            "logo": logo_match.group(1).strip() if logo_match else "",
            "id": id_match.group(1).strip() if id_match else "",
            "group": group or DEFAULT_GROUP,
        }
