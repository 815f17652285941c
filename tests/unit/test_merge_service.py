"""合并服务单元测试。

测试覆盖：
- 来源优先级与先到先得去重
- playlist 分组上限（按 group 计算）
- 本地覆盖条目的 source/category 强制
- 空数据源下仍输出全部分类
"""

from datetime import UTC, datetime

import pytest

from src.modules.channels.application.merge_service import MergeService
from src.modules.channels.domain.categories import DEFAULT_CATEGORIES
from src.modules.channels.domain.entities import ChannelSource, ChannelType


@pytest.fixture
def merge_service() -> MergeService:
    return MergeService(DEFAULT_CATEGORIES, group_cap=15, version="1.0")


def _playlist(entry_factory, group: str, count: int):
    return [
        entry_factory(
            f"https://iptv/{group.lower()}/{i}", name=f"{group} {i}", group=group
        )
        for i in range(count)
    ]


class TestMergeDocument:
    """输出文档结构测试。"""

    def test_empty_sources_keep_all_categories(self, merge_service):
        """三个网络源都为空时仍包含全部 16 个分类键。"""
        custom = {"news": [{"name": "Local News", "url": "https://local/news"}]}

        document = merge_service.merge({}, {}, {}, custom, {})

        assert list(document.categories) == list(DEFAULT_CATEGORIES)
        assert [e.url for e in document.categories["news"]] == ["https://local/news"]
        assert all(
            entries == []
            for name, entries in document.categories.items()
            if name != "news"
        )

    def test_header_fields(self, merge_service):
        now = datetime(2026, 10, 18, 6, 0, 0, 123456, tzinfo=UTC)

        document = merge_service.merge({}, {}, {}, {}, {}, now=now)
        payload = document.to_dict()

        assert payload["updated"] == "2026-10-18T06:00:00.123Z"
        assert payload["version"] == "1.0"
        assert set(payload) == {"updated", "version", "categories"}


class TestMergePrecedence:
    """来源优先级测试。"""

    def test_group_cap_applies_per_group(self, merge_service, entry_factory):
        """news 引用 News 与 General：News 最多 15，General 10 个全部保留。"""
        iptv = {
            "News": _playlist(entry_factory, "News", 20),
            "General": _playlist(entry_factory, "General", 10),
        }

        document = merge_service.merge(iptv, {}, {}, {}, {})
        news = document.categories["news"]

        assert len(news) == 25
        assert [e.group for e in news[:15]] == ["News"] * 15
        assert [e.group for e in news[15:]] == ["General"] * 10
        assert all(e.category == "news" for e in news)

    def test_source_order(self, merge_service, entry_factory):
        """条目按 iptv -> youtube -> tmdb -> custom -> user 顺序排列。"""
        iptv = {"Music": [entry_factory("https://iptv/music")]}
        youtube = {
            "music": [
                entry_factory(
                    "https://yt/1", source=ChannelSource.YOUTUBE, type_=ChannelType.VOD
                )
            ]
        }
        tmdb = {
            "music": [
                entry_factory(
                    "https://tmdb/1", source=ChannelSource.TMDB, type_=ChannelType.INFO
                )
            ]
        }
        custom = {"music": [{"name": "C", "url": "https://custom/1", "type": "mp4"}]}
        user = {"music": [{"name": "U", "url": "https://user/1", "type": "live"}]}

        document = merge_service.merge(iptv, youtube, tmdb, custom, user)

        music = document.categories["music"]
        assert [e.source for e in music] == [
            ChannelSource.IPTV,
            ChannelSource.YOUTUBE,
            ChannelSource.TMDB,
            ChannelSource.CUSTOM,
            ChannelSource.USER,
        ]

    def test_first_seen_wins(self, merge_service, entry_factory):
        """同一 URL 同时出现在 playlist 与 custom 时保留 playlist 条目。"""
        shared = "https://shared/stream.m3u8"
        iptv = {"Sports": [entry_factory(shared, name="From Playlist")]}
        custom = {"sports": [{"name": "From Custom", "url": shared}]}
        user = {"sports": [{"name": "From User", "url": shared}]}

        document = merge_service.merge(iptv, {}, {}, custom, user)

        sports = document.categories["sports"]
        assert len(sports) == 1
        assert sports[0].name == "From Playlist"
        assert sports[0].source == ChannelSource.IPTV

    def test_dedupe_within_same_source(self, merge_service, entry_factory):
        """同一分类引用的多个 group 中重复的 URL 只保留一次。"""
        iptv = {
            "News": [entry_factory("https://dup"), entry_factory("https://news/1")],
            "General": [entry_factory("https://dup"), entry_factory("https://gen/1")],
        }

        document = merge_service.merge(iptv, {}, {}, {}, {})

        urls = [e.url for e in document.categories["news"]]
        assert urls == ["https://dup", "https://news/1", "https://gen/1"]
        assert len(urls) == len(set(urls))

    def test_missing_url_discarded(self, merge_service):
        custom = {"kids": [{"name": "No URL"}, {"name": "Empty", "url": ""}]}

        document = merge_service.merge({}, {}, {}, custom, {})

        assert document.categories["kids"] == []

    def test_source_entries_are_not_mutated(self, merge_service, entry_factory):
        """同一 playlist 条目被多个分类引用时各自带自己的 category。"""
        entry = entry_factory("https://iptv/general/1")
        iptv = {"General": [entry]}

        document = merge_service.merge(iptv, {}, {}, {}, {})

        assert document.categories["news"][0].category == "news"
        assert document.categories["general"][0].category == "general"
        assert entry.category is None


class TestLocalOverrides:
    """本地覆盖条目测试。"""

    def test_forced_source_and_category(self, merge_service):
        """缺少 type 的 custom 条目原样保留，只强制 source 与 category。"""
        custom = {
            "travel": [
                {
                    "name": "Travel Cam",
                    "url": "https://cam/travel",
                    "source": "youtube",
                    "category": "news",
                    "featured": True,
                }
            ]
        }

        document = merge_service.merge({}, {}, {}, custom, {})
        payload = document.to_dict()["categories"]["travel"]

        assert payload == [
            {
                "name": "Travel Cam",
                "url": "https://cam/travel",
                "source": "custom",
                "category": "travel",
                "featured": True,
            }
        ]

    def test_user_entries_forced_source(self, merge_service):
        user = {"cooking": [{"name": "Mine", "url": "https://mine", "type": "vod"}]}

        document = merge_service.merge({}, {}, {}, {}, user)
        payload = document.to_dict()["categories"]["cooking"][0]

        assert payload["source"] == "user"
        assert payload["type"] == "vod"

    def test_null_and_loose_fields_kept_verbatim(self, merge_service):
        """null 或非字符串的展示字段不导致条目被丢弃，按原值输出。"""
        custom = {
            "news": [
                {
                    "name": "Local",
                    "url": "https://local/news",
                    "logo": None,
                    "desc": None,
                    "id": 42,
                    "type": "radio",
                }
            ]
        }
        user = {"news": [{"name": 7, "url": "https://user/news", "group": ["a"]}]}

        document = merge_service.merge({}, {}, {}, custom, user)
        payload = document.to_dict()["categories"]["news"]

        assert payload == [
            {
                "name": "Local",
                "url": "https://local/news",
                "logo": None,
                "desc": None,
                "id": 42,
                "type": "radio",
                "source": "custom",
                "category": "news",
            },
            {
                "name": 7,
                "url": "https://user/news",
                "group": ["a"],
                "source": "user",
                "category": "news",
            },
        ]

    def test_null_url_discarded(self, merge_service):
        custom = {"kids": [{"name": "Null URL", "url": None}]}

        document = merge_service.merge({}, {}, {}, custom, {})

        assert document.categories["kids"] == []

    def test_malformed_records_skipped(self, merge_service):
        """非对象记录、url 非字符串的记录与非列表分类值被忽略，不影响其它条目。"""
        custom = {
            "health": [
                "https://just-a-string",
                {"name": 5, "url": ["bad"]},
                {"url": "https://ok"},
            ],
            "business": {"url": "https://not-a-list"},
        }

        document = merge_service.merge({}, {}, {}, custom, {})

        assert [e.url for e in document.categories["health"]] == ["https://ok"]
        assert document.categories["business"] == []

    def test_unknown_override_category_ignored(self, merge_service):
        custom = {"weather": [{"url": "https://weather"}]}

        document = merge_service.merge({}, {}, {}, custom, {})

        assert "weather" not in document.categories


class TestDedupeByUrl:
    """URL 去重工具测试。"""

    def test_keeps_first_occurrence(self, entry_factory):
        entries = [
            entry_factory("https://a", name="first"),
            entry_factory("https://b"),
            entry_factory("https://a", name="second"),
        ]

        deduped = MergeService.dedupe_by_url(entries)

        assert [e.name for e in deduped if e.url == "https://a"] == ["first"]
        assert len(deduped) == 2
