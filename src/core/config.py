"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "blogtv-channels"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    DRY_RUN: bool = False

    # Data files
    DATA_DIR: Path = Path("data")
    CHANNELS_FILE: str = "channels.json"
    URL_HISTORY_FILE: str = "url_history.json"
    CUSTOM_CHANNELS_FILE: str = "custom_channels.json"
    USER_CHANNELS_FILE: str = "user_channels.json"
    OUTPUT_VERSION: str = "1.0"

    # iptv-org playlist
    IPTV_PLAYLIST_URL: str = "https://iptv-org.github.io/iptv/index.m3u"
    PLAYLIST_TIMEOUT_SEC: float = 30.0
    PLAYLIST_GROUP_CAP: int = 60

    # YouTube Data API v3
    YOUTUBE_API_KEY: str | None = None
    YOUTUBE_API_BASE: str = "https://www.googleapis.com/youtube/v3"
    YOUTUBE_MAX_RESULTS: int = 8
    YOUTUBE_REQUEST_DELAY_SEC: float = 0.25

    # TMDB
    TMDB_API_KEY: str | None = None
    TMDB_API_BASE: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE: str = "https://image.tmdb.org/t/p/w92"
    TMDB_MAX_RESULTS: int = 8
    TMDB_REQUEST_DELAY_SEC: float = 0.15

    # Fetcher
    FETCHER_TIMEOUT_SEC: float = 15.0
    FETCHER_USER_AGENT: str = "Mozilla/5.0 (compatible; BlogTV-ChannelBuilder/1.0)"
    DESC_MAX_LENGTH: int = 120

    # Merge
    MERGE_GROUP_CAP: int = 15  # 每个 playlist group 对每个分类的贡献上限
    URL_HISTORY_CAP: int = 50

    @computed_field
    @property
    def youtube_enabled(self) -> bool:
        return bool(self.YOUTUBE_API_KEY)

    @computed_field
    @property
    def tmdb_enabled(self) -> bool:
        return bool(self.TMDB_API_KEY)


settings = Settings()
