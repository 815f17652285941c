#!/usr/bin/env python3
"""频道数据构建脚本。

从 iptv-org、YouTube、TMDB 以及本地 custom/user 列表抓取并合并频道，
写出 Roku 客户端使用的 data/channels.json 与 data/url_history.json。

使用方式：
    # 正常运行（写文件）
    YOUTUBE_API_KEY=xxx TMDB_API_KEY=yyy python scripts/build_channels.py

    # 只抓取与合并，打印样例，不写文件
    python scripts/build_channels.py --dry-run

    # 指定数据目录 / 以 JSON 输出运行摘要
    python scripts/build_channels.py --data-dir ./data --json

退出码：
    0 - 完成
    1 - 未被各数据源兜底的异常（致命错误）
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


async def build(dry_run: bool, data_dir: Path | None) -> dict:
    """执行一次构建并返回运行摘要。"""
    from loguru import logger

    from src.core.config import settings
    from src.modules.channels.infrastructure.dependencies import (
        get_channel_build_service,
    )

    logger.info("=== BlogTV Channel Builder ===")
    logger.info(f"Mode: {'DRY RUN' if dry_run else 'LIVE'}")
    logger.info(f"YouTube API: {'enabled' if settings.youtube_enabled else 'disabled'}")
    logger.info(f"TMDB API:    {'enabled' if settings.tmdb_enabled else 'disabled'}")

    service = get_channel_build_service(settings, data_dir=data_dir)
    report = await service.run(dry_run=dry_run)

    return {
        "stage": report.stage.value,
        "dry_run": report.dry_run,
        "updated": report.channels.updated,
        "total_channels": report.total_channels,
        "url_history_entries": len(report.url_history),
        "sources": {
            source.value: {
                "status": result.status.value,
                "ok": result.is_success,
                "items": result.items_count,
                "error": result.error_message,
            }
            for source, result in report.fetch_results.items()
        },
        "written": [str(path) for path in report.written],
        "sample": report.sample() if dry_run else [],
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Build BlogTV channel data files")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and merge, print a sample, do not write files",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for local overrides and outputs (default: DATA_DIR)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print run summary as JSON",
    )
    args = parser.parse_args()

    from loguru import logger

    from src.core.config import settings
    from src.core.domain.exceptions import DomainException
    from src.core.infrastructure.logging import setup_logging

    setup_logging(settings)
    dry_run = args.dry_run or settings.DRY_RUN

    try:
        summary = asyncio.run(build(dry_run, args.data_dir))
    except DomainException as e:
        logger.error(f"Fatal [{e.error_code}]: {e.message}")
        return 1
    except Exception as e:
        logger.exception(f"Fatal: {e}")
        return 1

    if args.json:
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    elif dry_run:
        print("Sample output:", json.dumps(summary["sample"], indent=2, ensure_ascii=False))

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
