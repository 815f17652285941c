"""本地 JSON 存储单元测试。"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from src.modules.channels.domain.store import LoadStatus
from src.modules.channels.infrastructure.local_store import JsonFileStore


class TestJsonFileStoreLoad:
    """读取本地文件测试。"""

    def test_missing_file(self, tmp_path: Path):
        """文件不存在时返回空映射。"""
        store = JsonFileStore(tmp_path)

        result = store.load("custom_channels.json")

        assert result.status == LoadStatus.MISSING
        assert result.mapping == {}

    def test_invalid_json(self, tmp_path: Path):
        """解析失败只产生告警，不抛出。"""
        (tmp_path / "user_channels.json").write_text("{not json", encoding="utf-8")
        store = JsonFileStore(tmp_path)

        with patch(
            "src.modules.channels.infrastructure.local_store.BusinessEvents"
        ) as events:
            result = store.load("user_channels.json")

        assert result.status == LoadStatus.INVALID
        assert result.mapping == {}
        assert result.error_message
        events.local_file_invalid.assert_called_once()

    def test_loaded_mapping(self, tmp_path: Path):
        payload = {"news": [{"name": "Local", "url": "https://local/news"}]}
        (tmp_path / "custom_channels.json").write_text(
            json.dumps(payload), encoding="utf-8"
        )
        store = JsonFileStore(tmp_path)

        result = store.load("custom_channels.json")

        assert result.status == LoadStatus.LOADED
        assert result.mapping == payload

    def test_non_object_content_has_empty_mapping(self, tmp_path: Path):
        """顶层是列表时 data 保留原样，mapping 为空。"""
        (tmp_path / "url_history.json").write_text('["https://a"]', encoding="utf-8")
        store = JsonFileStore(tmp_path)

        result = store.load("url_history.json")

        assert result.status == LoadStatus.LOADED
        assert result.data == ["https://a"]
        assert result.mapping == {}


class TestJsonFileStoreWrite:
    """写入输出文件测试。"""

    def test_write_creates_directory(self, tmp_path: Path):
        store = JsonFileStore(tmp_path / "nested" / "data")

        path = store.write_json("channels.json", {"version": "1.0", "名称": "频道"})

        assert path == tmp_path / "nested" / "data" / "channels.json"
        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == {"version": "1.0", "名称": "频道"}
        assert "频道" in text  # ensure_ascii=False
        assert text.startswith('{\n  "version"')

    def test_write_replaces_whole_file(self, tmp_path: Path):
        store = JsonFileStore(tmp_path)
        store.write_json("url_history.json", ["a", "b", "c"])

        store.write_json("url_history.json", ["x"])

        assert json.loads((tmp_path / "url_history.json").read_text()) == ["x"]
        assert [p.name for p in tmp_path.iterdir()] == ["url_history.json"]

    def test_failed_write_keeps_previous_file(self, tmp_path: Path):
        """序列化失败时旧文件保持不变且不残留临时文件。"""
        store = JsonFileStore(tmp_path)
        store.write_json("channels.json", {"ok": True})

        with pytest.raises(TypeError):
            store.write_json("channels.json", {"bad": object()})

        assert json.loads((tmp_path / "channels.json").read_text()) == {"ok": True}
        assert [p.name for p in tmp_path.iterdir()] == ["channels.json"]

    def test_failed_replace_removes_temp_file(self, tmp_path: Path):
        """rename 失败时异常向上传播，且不残留临时文件。"""
        store = JsonFileStore(tmp_path)
        store.write_json("channels.json", {"ok": True})

        with patch(
            "src.modules.channels.infrastructure.local_store.os.replace",
            side_effect=OSError("cross-device link"),
        ):
            with pytest.raises(OSError, match="cross-device"):
                store.write_json("channels.json", {"ok": False})

        assert json.loads((tmp_path / "channels.json").read_text()) == {"ok": True}
        assert [p.name for p in tmp_path.iterdir()] == ["channels.json"]
