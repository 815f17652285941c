"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于抓取进度、告警等一般运行日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import Settings, settings


def setup_logging(config: Settings | None = None) -> None:
    """Configure application logging with structlog and loguru."""
    config = config or settings

    _configure_structlog(config)
    _configure_loguru(config)

    logger.debug(f"Logging configured with level: {config.LOG_LEVEL}")


def _configure_structlog(config: Settings) -> None:
    """配置 structlog 处理器链。"""
    if config.ENVIRONMENT == "local":
        # 本地运行使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        # CI / 生产环境使用 JSON 格式
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(config.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru(config: Settings) -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=config.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if config.ENVIRONMENT != "local":
        logger.add(
            "logs/channel_builder_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.source_fetched(source="youtube", status="success", items_count=64)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def source_fetched(
        cls,
        source: str,
        status: str,
        items_count: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录数据源抓取完成事件。"""
        cls._log.info(
            "source_fetched",
            event_type="fetch",
            source=source,
            status=status,
            items_count=items_count,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def source_fetch_failed(
        cls,
        source: str,
        error: str,
        key: str | None = None,
        **extra: Any,
    ) -> None:
        """记录数据源（或其中某个分类）抓取失败事件。"""
        cls._log.warning(
            "source_fetch_failed",
            event_type="fetch_error",
            source=source,
            key=key,
            error=error,
            **extra,
        )

    @classmethod
    def source_skipped(
        cls,
        source: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录数据源被跳过（缺少凭证）事件。"""
        cls._log.info(
            "source_skipped",
            event_type="degradation",
            source=source,
            reason=reason,
            **extra,
        )

    @classmethod
    def local_file_invalid(
        cls,
        filename: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录本地 JSON 文件解析失败事件。"""
        cls._log.warning(
            "local_file_invalid",
            event_type="local_error",
            filename=filename,
            error=error,
            **extra,
        )

    @classmethod
    def category_merged(
        cls,
        category: str,
        candidates: int,
        total: int,
        **extra: Any,
    ) -> None:
        """记录单个分类合并完成事件。"""
        cls._log.info(
            "category_merged",
            event_type="merge",
            category=category,
            candidates=candidates,
            total=total,
            duplicates=candidates - total,
            **extra,
        )

    @classmethod
    def outputs_written(
        cls,
        paths: list[str],
        total_channels: int,
        history_entries: int,
        **extra: Any,
    ) -> None:
        """记录输出文件写入事件。"""
        cls._log.info(
            "outputs_written",
            event_type="write",
            paths=paths,
            total_channels=total_channels,
            history_entries=history_entries,
            **extra,
        )
