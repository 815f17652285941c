"""抓取器工厂。

根据来源类型与配置创建相应的抓取器实例。
"""

import httpx

from src.core.config import Settings, settings
from src.modules.channels.domain.categories import CategoryTable
from src.modules.channels.domain.entities import ChannelSource
from src.modules.channels.domain.exceptions import InvalidFetcherConfigError
from src.modules.channels.infrastructure.fetchers.base import HttpFetcher
from src.modules.channels.infrastructure.fetchers.iptv import IptvPlaylistFetcher
from src.modules.channels.infrastructure.fetchers.tmdb import TMDBFetcher
from src.modules.channels.infrastructure.fetchers.youtube import YouTubeFetcher

NETWORK_SOURCES: tuple[ChannelSource, ...] = (
    ChannelSource.IPTV,
    ChannelSource.YOUTUBE,
    ChannelSource.TMDB,
)


class FetcherFactory:
    """抓取器工厂类。"""

    @staticmethod
    def create(
        source: ChannelSource,
        categories: CategoryTable,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HttpFetcher:
        """根据来源创建抓取器。

        Args:
            source: 来源标签（只支持三个网络来源）
            categories: 分类表
            config: 配置，不指定则使用全局 settings
            transport: 自定义 httpx transport

        Returns:
            对应的抓取器实例

        Raises:
            InvalidFetcherConfigError: 不支持的来源
        """
        config = config or settings

        if source == ChannelSource.IPTV:
            return IptvPlaylistFetcher(
                categories,
                config.PLAYLIST_GROUP_CAP,
                playlist_url=config.IPTV_PLAYLIST_URL,
                timeout_sec=config.PLAYLIST_TIMEOUT_SEC,
                transport=transport,
            )
        if source == ChannelSource.YOUTUBE:
            return YouTubeFetcher(
                categories,
                config.YOUTUBE_MAX_RESULTS,
                api_key=config.YOUTUBE_API_KEY,
                api_base=config.YOUTUBE_API_BASE,
                request_delay_sec=config.YOUTUBE_REQUEST_DELAY_SEC,
                desc_max_length=config.DESC_MAX_LENGTH,
                timeout_sec=config.FETCHER_TIMEOUT_SEC,
                transport=transport,
            )
        if source == ChannelSource.TMDB:
            return TMDBFetcher(
                categories,
                config.TMDB_MAX_RESULTS,
                api_key=config.TMDB_API_KEY,
                api_base=config.TMDB_API_BASE,
                image_base=config.TMDB_IMAGE_BASE,
                request_delay_sec=config.TMDB_REQUEST_DELAY_SEC,
                desc_max_length=config.DESC_MAX_LENGTH,
                timeout_sec=config.FETCHER_TIMEOUT_SEC,
                transport=transport,
            )
        raise InvalidFetcherConfigError(f"Unsupported source: {source}")

    @classmethod
    def create_all(
        cls,
        categories: CategoryTable,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> list[HttpFetcher]:
        """创建全部网络抓取器（顺序：iptv-org, YouTube, TMDB）。"""
        return [
            cls.create(source, categories, config, transport)
            for source in NETWORK_SOURCES
        ]
