"""Build the url_history.json document."""

from collections.abc import Iterable
from typing import Any

from src.modules.channels.domain.history import (
    DEFAULT_URL_HISTORY,
    extract_persisted_urls,
)


class UrlHistoryService:
    """合并默认 URL 与上次持久化的 URL（默认在前，去重后截断）。"""

    def __init__(
        self,
        defaults: Iterable[str] = DEFAULT_URL_HISTORY,
        cap: int = 50,
    ) -> None:
        self.defaults = tuple(defaults)
        self.cap = cap

    def build(self, persisted: Any) -> list[str]:
        """Return the new history list.

        Args:
            persisted: 上次运行写入的内容（列表、带 ``urls`` 的对象或 None）

        Returns:
            去重（保留首次出现顺序）并截断到 cap 的 URL 列表
        """
        merged = list(dict.fromkeys([*self.defaults, *extract_persisted_urls(persisted)]))
        return merged[: self.cap]
