"""Infrastructure store for local JSON data files."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.channels.domain.store import ChannelStore, LoadResult, LoadStatus


class JsonFileStore(ChannelStore):
    """Read and write JSON documents under one data directory.

    读取容忍文件缺失与解析失败（返回 MISSING / INVALID 结果，只记录告警）；
    写入整体替换目标文件，失败时异常向上传播。
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def path_for(self, filename: str) -> Path:
        return self.data_dir / filename

    def load(self, filename: str) -> LoadResult:
        path = self.path_for(filename)
        if not path.exists():
            logger.debug(f"Local file not found, using empty default: {path}")
            return LoadResult(filename=filename, status=LoadStatus.MISSING)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning(f"  WARN: could not parse {filename}: {exc}")
            BusinessEvents.local_file_invalid(filename=filename, error=str(exc))
            return LoadResult(
                filename=filename,
                status=LoadStatus.INVALID,
                error_message=str(exc),
            )

        return LoadResult(filename=filename, status=LoadStatus.LOADED, data=data)

    def write_json(self, filename: str, payload: Any) -> Path:
        """Atomically replace ``filename`` with pretty-printed JSON."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(filename)

        with tempfile.NamedTemporaryFile(
            "w",
            dir=self.data_dir,
            prefix=f".{filename}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp:
            try:
                json.dump(payload, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            except BaseException:
                tmp.close()
                os.unlink(tmp.name)
                raise
        try:
            os.replace(tmp.name, path)
        except BaseException:
            os.unlink(tmp.name)
            raise
        return path
