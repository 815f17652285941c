"""YouTube Data API v3 fetcher implementation."""

from __future__ import annotations

import asyncio
import time
from typing import Any

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

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class YouTubeFetcher(HttpFetcher):
    """Search topic-matched videos for every category, one request at a time."""

    source = ChannelSource.YOUTUBE

    def __init__(
        self,
        categories: CategoryTable,
        max_items: int | None = None,
        *,
        api_key: str | None = None,
        api_base: str | None = None,
        request_delay_sec: float | None = None,
        desc_max_length: int | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            categories,
            settings.YOUTUBE_MAX_RESULTS if max_items is None else max_items,
            timeout_sec=timeout_sec,
            transport=transport,
        )
        self.api_key = api_key
        self.api_base = api_base or settings.YOUTUBE_API_BASE
        self.request_delay_sec = (
            settings.YOUTUBE_REQUEST_DELAY_SEC
            if request_delay_sec is None
            else request_delay_sec
        )
        self.desc_max_length = desc_max_length or settings.DESC_MAX_LENGTH

    def validate_config(self) -> tuple[bool, str | None]:
        if not self.api_base.startswith(("http://", "https://")):
            return False, "api_base must be a valid HTTP(S) URL"
        return True, None

    async def fetch(self) -> FetchResult:
        if not self.api_key:
            logger.info("  YouTube: no API key, skipping")
            return FetchResult.skipped(self.source, "YOUTUBE_API_KEY not set")

        start_time = time.time()
        valid, error = self.validate_config()
        if not valid:
            return FetchResult.failed(self.source, error or "Invalid config")

        logger.info("Fetching YouTube...")
        groups: FetchedGroups = {}
        errors: dict[str, str] = {}

        async with self._client() as client:
            for index, (category, descriptor) in enumerate(self.categories.items()):
                if index > 0 and self.request_delay_sec > 0:
                    # 配额保护：分类之间串行并插入固定间隔
                    await asyncio.sleep(self.request_delay_sec)

                try:
                    payload = await self._search(client, descriptor.yt_query)
                    groups[category] = self._parse_payload(payload)
                except httpx.TimeoutException as exc:
                    errors[category] = f"Timeout: {str(exc)}"
                except httpx.HTTPStatusError as exc:
                    errors[category] = f"HTTP {exc.response.status_code}"
                except (httpx.HTTPError, ValueError, TypeError, KeyError) as exc:
                    errors[category] = f"Error: {str(exc)}"

                if category in errors:
                    logger.warning(
                        f"YouTube fetch failed for [{category}]: {errors[category]}"
                    )
                    continue
                logger.info(f"  YouTube [{category}]: {len(groups[category])} videos")

        return FetchResult.success(
            self.source,
            groups,
            errors=errors,
            duration_ms=self._elapsed_ms(start_time),
            metadata={"requests": len(self.categories)},
        )

    async def _search(self, client: httpx.AsyncClient, query: str) -> Any:
        response = await client.get(
            f"{self.api_base.rstrip('/')}/search",
            params={
                "key": self.api_key,
                "q": query,
                "part": "snippet",
                "type": "video",
                "maxResults": self.max_items,
                "videoEmbeddable": "true",
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        return response.json()

    def _parse_payload(self, payload: Any) -> list[ChannelEntry]:
        if not isinstance(payload, dict):
            raise ValueError("YouTube response payload must be an object")
        items_raw = payload.get("items")
        if not isinstance(items_raw, list):
            raise ValueError("YouTube response missing items list")

        entries: list[ChannelEntry] = []
        for item in items_raw:
            if not isinstance(item, dict):
                continue
            id_value = item.get("id")
            video_id = id_value.get("videoId") if isinstance(id_value, dict) else None
            if not isinstance(video_id, str) or not video_id:
                continue

            snippet = item.get("snippet")
            if not isinstance(snippet, dict):
                snippet = {}
            entries.append(
                ChannelEntry(
                    name=snippet.get("title") or "",
                    url=WATCH_URL.format(video_id=video_id),
                    logo=self._thumbnail_url(snippet.get("thumbnails")),
                    desc=self._truncate(
                        snippet.get("description"), self.desc_max_length
                    ),
                    source=self.source,
                    type=ChannelType.VOD,
                )
            )
        return entries[: self.max_items]

    @staticmethod
    def _thumbnail_url(thumbnails: Any) -> str:
        default = thumbnails.get("default") if isinstance(thumbnails, dict) else None
        url = default.get("url") if isinstance(default, dict) else None
        return url if isinstance(url, str) else ""
