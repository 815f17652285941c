"""频道数据源抓取器模块。"""

from src.modules.channels.infrastructure.fetchers.base import HttpFetcher
from src.modules.channels.infrastructure.fetchers.factory import FetcherFactory
from src.modules.channels.infrastructure.fetchers.iptv import IptvPlaylistFetcher
from src.modules.channels.infrastructure.fetchers.tmdb import TMDBFetcher
from src.modules.channels.infrastructure.fetchers.youtube import YouTubeFetcher

__all__ = [
    "HttpFetcher",
    "IptvPlaylistFetcher",
    "TMDBFetcher",
    "YouTubeFetcher",
    "FetcherFactory",
]
