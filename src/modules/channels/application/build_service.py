"""Channel build orchestration: fetch -> merge -> write (or report)."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.channels.application.history_service import UrlHistoryService
from src.modules.channels.application.merge_service import MergeService
from src.modules.channels.application.models import BuildReport, BuildStage
from src.modules.channels.domain.entities import ChannelSource
from src.modules.channels.domain.fetcher import BaseFetcher, FetchResult, FetchStatus
from src.modules.channels.domain.store import ChannelStore, LoadStatus


class ChannelBuildService:
    """编排一次完整的频道构建。

    三个网络抓取器并发执行（join 而非 race）；本地文件与历史记录在抓取后读取；
    所有合并完成后才一次性写出两个输出文件。dry run 时只生成报告不写文件。
    各抓取器自行消化网络错误，逃逸到这里的异常视为致命错误直接向上抛出。
    """

    def __init__(
        self,
        fetchers: Sequence[BaseFetcher],
        store: ChannelStore,
        merge_service: MergeService,
        history_service: UrlHistoryService,
        *,
        channels_file: str = "channels.json",
        history_file: str = "url_history.json",
        custom_file: str = "custom_channels.json",
        user_file: str = "user_channels.json",
    ) -> None:
        self.fetchers = list(fetchers)
        self.store = store
        self.merge_service = merge_service
        self.history_service = history_service
        self.channels_file = channels_file
        self.history_file = history_file
        self.custom_file = custom_file
        self.user_file = user_file
        self.stage = BuildStage.PENDING

    async def run(self, dry_run: bool = False) -> BuildReport:
        """Run the build and return its report."""
        self._enter(BuildStage.FETCHING)
        fetch_results = await self.fetch_all()

        self._enter(BuildStage.MERGING)
        custom = self.store.load(self.custom_file).mapping
        user = self.store.load(self.user_file).mapping

        logger.info("Merging...")
        channels = self.merge_service.merge(
            self._groups(fetch_results, ChannelSource.IPTV),
            self._groups(fetch_results, ChannelSource.YOUTUBE),
            self._groups(fetch_results, ChannelSource.TMDB),
            custom,
            user,
        )

        previous = self.store.load(self.history_file)
        url_history = self.history_service.build(
            previous.data if previous.status == LoadStatus.LOADED else None
        )

        logger.info(f"Total channels: {channels.total_channels}")
        logger.info(f"URL history entries: {len(url_history)}")

        report = BuildReport(
            stage=self.stage,
            dry_run=dry_run,
            channels=channels,
            url_history=url_history,
            fetch_results=fetch_results,
        )

        if dry_run:
            self._enter(BuildStage.REPORTING)
            logger.info(
                f"[DRY RUN] Would write {self.channels_file} and {self.history_file}"
            )
        else:
            self._enter(BuildStage.WRITING)
            report.written = [
                self.store.write_json(self.channels_file, channels.to_dict()),
                self.store.write_json(self.history_file, url_history),
            ]
            logger.info(f"Wrote {', '.join(str(p) for p in report.written)}")
            BusinessEvents.outputs_written(
                paths=[str(p) for p in report.written],
                total_channels=channels.total_channels,
                history_entries=len(url_history),
            )

        report.stage = self.stage
        return report

    async def fetch_all(self) -> dict[ChannelSource, FetchResult]:
        """Run every fetcher concurrently and wait for all of them."""
        results = await asyncio.gather(*(fetcher.fetch() for fetcher in self.fetchers))

        by_source: dict[ChannelSource, FetchResult] = {}
        for result in results:
            by_source[result.source] = result
            self._record(result)
        return by_source

    @staticmethod
    def _groups(
        results: dict[ChannelSource, FetchResult], source: ChannelSource
    ) -> dict:
        result = results.get(source)
        return result.groups if result is not None else {}

    @staticmethod
    def _record(result: FetchResult) -> None:
        source = result.source.value
        if result.status == FetchStatus.SKIPPED:
            BusinessEvents.source_skipped(
                source=source, reason=result.error_message or ""
            )
            return

        if result.status == FetchStatus.FAILED:
            logger.warning(f"{source} unavailable this run: {result.error_message}")
            BusinessEvents.source_fetch_failed(
                source=source, error=result.error_message or "unknown error"
            )
            return

        for key, error in result.errors.items():
            BusinessEvents.source_fetch_failed(source=source, error=error, key=key)
        BusinessEvents.source_fetched(
            source=source,
            status=result.status.value,
            items_count=result.items_count,
            duration_ms=result.duration_ms,
        )

    def _enter(self, stage: BuildStage) -> None:
        logger.debug(f"Build stage: {self.stage.value} -> {stage.value}")
        self.stage = stage
