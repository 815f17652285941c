"""HTTP 抓取器基类。

在领域 BaseFetcher 之上提供 httpx 客户端构造与耗时统计。
"""

import time

import httpx

from src.core.config import settings
from src.modules.channels.domain.categories import CategoryTable
from src.modules.channels.domain.fetcher import BaseFetcher


class HttpFetcher(BaseFetcher):
    """基于 httpx.AsyncClient 的抓取器基类。"""

    def __init__(
        self,
        categories: CategoryTable,
        max_items: int = 8,
        *,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """初始化抓取器。

        Args:
            categories: 分类表
            max_items: 每个分组最多保留的条目数
            timeout_sec: 单个请求超时（秒）
            user_agent: 请求 User-Agent
            transport: 自定义 httpx transport（测试时注入 MockTransport）
        """
        super().__init__(categories, max_items)
        self.timeout_sec = timeout_sec or settings.FETCHER_TIMEOUT_SEC
        self.user_agent = user_agent or settings.FETCHER_USER_AGENT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_sec,
            follow_redirects=True,
            transport=self.transport,
            headers={"User-Agent": self.user_agent},
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)
