"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不访问网络，HTTP 通过 httpx.MockTransport 模拟）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=src --cov-report=html
"""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from src.core.config import Settings
from src.modules.channels.domain.categories import CategoryDescriptor, CategoryTable
from src.modules.channels.domain.entities import (
    ChannelEntry,
    ChannelSource,
    ChannelType,
)

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """测试环境配置（无 API key、无请求间隔、数据目录在 tmp_path）。"""
    return Settings(
        _env_file=None,
        ENVIRONMENT="local",
        DATA_DIR=tmp_path,
        YOUTUBE_API_KEY=None,
        TMDB_API_KEY=None,
        YOUTUBE_REQUEST_DELAY_SEC=0,
        TMDB_REQUEST_DELAY_SEC=0,
    )


@pytest.fixture
def small_table() -> CategoryTable:
    """三分类的替代分类表，其中 news 与 politics 共享 TMDB 类型 ID。"""
    return CategoryTable(
        {
            "news": CategoryDescriptor(("News", "General"), "news live stream", 10763),
            "music": CategoryDescriptor(("Music",), "music live stream", 10749),
            "politics": CategoryDescriptor(
                ("News", "General"), "politics documentary", 10763
            ),
        }
    )


# ============================================
# 数据 Fixtures
# ============================================


def make_entry(
    url: str,
    name: str = "Channel",
    source: ChannelSource = ChannelSource.IPTV,
    type_: ChannelType = ChannelType.LIVE,
    **extra,
) -> ChannelEntry:
    return ChannelEntry(name=name, url=url, source=source, type=type_, **extra)


@pytest.fixture
def entry_factory() -> Callable[..., ChannelEntry]:
    return make_entry


# ============================================
# HTTP Fixtures
# ============================================


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_transport(
    recorded_requests: list[httpx.Request],
) -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """包装 handler 为 MockTransport，并记录所有请求。"""

    def build(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> httpx.MockTransport:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.MockTransport(recording_handler)

    return build
