"""TMDB discover fetcher implementation."""

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

DETAIL_URL = "https://www.themoviedb.org/tv/{show_id}"


class TMDBFetcher(HttpFetcher):
    """Fetch popular TV show metadata by genre.

    TMDB 按类型 ID 查询而不是按分类：同一类型 ID 只请求一次，
    由分类表中第一个声明它的分类获得结果，后续共享该 ID 的分类没有 TMDB 条目。
    """

    source = ChannelSource.TMDB

    def __init__(
        self,
        categories: CategoryTable,
        max_items: int | None = None,
        *,
        api_key: str | None = None,
        api_base: str | None = None,
        image_base: str | None = None,
        request_delay_sec: float | None = None,
        desc_max_length: int | None = None,
        timeout_sec: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            categories,
            settings.TMDB_MAX_RESULTS if max_items is None else max_items,
            timeout_sec=timeout_sec,
            transport=transport,
        )
        self.api_key = api_key
        self.api_base = api_base or settings.TMDB_API_BASE
        self.image_base = image_base or settings.TMDB_IMAGE_BASE
        self.request_delay_sec = (
            settings.TMDB_REQUEST_DELAY_SEC
            if request_delay_sec is None
            else request_delay_sec
        )
        self.desc_max_length = desc_max_length or settings.DESC_MAX_LENGTH

    def validate_config(self) -> tuple[bool, str | None]:
        if not self.api_base.startswith(("http://", "https://")):
            return False, "api_base must be a valid HTTP(S) URL"
        return True, None

    def genre_claims(self) -> dict[int, str]:
        """Genre id -> first category (in table order) that claims it."""
        claims: dict[int, str] = {}
        for category, descriptor in self.categories.items():
            claims.setdefault(descriptor.tmdb_genre_id, category)
        return claims

    async def fetch(self) -> FetchResult:
        if not self.api_key:
            logger.info("  TMDB: no API key, skipping")
            return FetchResult.skipped(self.source, "TMDB_API_KEY not set")

        start_time = time.time()
        valid, error = self.validate_config()
        if not valid:
            return FetchResult.failed(self.source, error or "Invalid config")

        logger.info("Fetching TMDB...")
        groups: FetchedGroups = {}
        errors: dict[str, str] = {}
        claims = self.genre_claims()

        async with self._client() as client:
            for index, (genre_id, category) in enumerate(claims.items()):
                if index > 0 and self.request_delay_sec > 0:
                    await asyncio.sleep(self.request_delay_sec)

                try:
                    payload = await self._discover(client, genre_id)
                    groups[category] = self._parse_payload(payload)
                except httpx.TimeoutException as exc:
                    errors[category] = f"Timeout: {str(exc)}"
                except httpx.HTTPStatusError as exc:
                    errors[category] = f"HTTP {exc.response.status_code}"
                except (httpx.HTTPError, ValueError, TypeError, KeyError) as exc:
                    errors[category] = f"Error: {str(exc)}"

                if category in errors:
                    logger.warning(
                        f"TMDB fetch failed for [{category}] "
                        f"(genre {genre_id}): {errors[category]}"
                    )
                    continue
                logger.info(f"  TMDB [{category}]: {len(groups[category])} shows")

        return FetchResult.success(
            self.source,
            groups,
            errors=errors,
            duration_ms=self._elapsed_ms(start_time),
            metadata={"requests": len(claims), "genres": list(claims)},
        )

    async def _discover(self, client: httpx.AsyncClient, genre_id: int) -> Any:
        response = await client.get(
            f"{self.api_base.rstrip('/')}/discover/tv",
            params={
                "api_key": self.api_key,
                "with_genres": genre_id,
                "sort_by": "popularity.desc",
                "page": 1,
            },
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
        return response.json()

    def _parse_payload(self, payload: Any) -> list[ChannelEntry]:
        if not isinstance(payload, dict):
            raise ValueError("TMDB response payload must be an object")
        results = payload.get("results")
        if not isinstance(results, list):
            raise ValueError("TMDB response missing results list")

        entries: list[ChannelEntry] = []
        for raw in results[: self.max_items]:
            if not isinstance(raw, dict) or raw.get("id") is None:
                continue
            poster_path = raw.get("poster_path")
            entries.append(
                ChannelEntry(
                    name=raw.get("name") or raw.get("original_name") or "",
                    url=DETAIL_URL.format(show_id=raw.get("id")),
                    logo=f"{self.image_base}{poster_path}" if poster_path else "",
                    desc=self._truncate(raw.get("overview"), self.desc_max_length),
                    source=self.source,
                    # TMDB 链接是详情页，不是直接可播放的流
                    type=ChannelType.INFO,
                )
            )
        return entries
