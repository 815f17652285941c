"""Channel module wiring."""

from pathlib import Path

import httpx

from src.core.config import Settings, settings
from src.modules.channels.application.build_service import ChannelBuildService
from src.modules.channels.application.history_service import UrlHistoryService
from src.modules.channels.application.merge_service import MergeService
from src.modules.channels.domain.categories import DEFAULT_CATEGORIES, CategoryTable
from src.modules.channels.infrastructure.fetchers.factory import FetcherFactory
from src.modules.channels.infrastructure.local_store import JsonFileStore


def get_channel_build_service(
    config: Settings | None = None,
    *,
    categories: CategoryTable = DEFAULT_CATEGORIES,
    data_dir: Path | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ChannelBuildService:
    """Assemble a ChannelBuildService from settings."""
    config = config or settings

    return ChannelBuildService(
        fetchers=FetcherFactory.create_all(categories, config, transport),
        store=JsonFileStore(data_dir or config.DATA_DIR),
        merge_service=MergeService(
            categories,
            group_cap=config.MERGE_GROUP_CAP,
            version=config.OUTPUT_VERSION,
        ),
        history_service=UrlHistoryService(cap=config.URL_HISTORY_CAP),
        channels_file=config.CHANNELS_FILE,
        history_file=config.URL_HISTORY_FILE,
        custom_file=config.CUSTOM_CHANNELS_FILE,
        user_file=config.USER_CHANNELS_FILE,
    )
