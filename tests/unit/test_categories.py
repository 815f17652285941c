"""分类表单元测试。"""

import dataclasses

import pytest

from src.modules.channels.domain.categories import (
    DEFAULT_CATEGORIES,
    CategoryDescriptor,
    CategoryTable,
)
from src.modules.channels.domain.exceptions import UnknownCategoryError

EXPECTED_CATEGORIES = [
    "news",
    "technology",
    "science",
    "history",
    "sports",
    "music",
    "entertainment",
    "nature",
    "cooking",
    "travel",
    "politics",
    "business",
    "health",
    "kids",
    "animation",
    "general",
]


class TestDefaultCategories:
    """默认分类表测试。"""

    def test_has_sixteen_categories_in_order(self):
        """分类名与顺序固定（下游客户端依赖）。"""
        assert list(DEFAULT_CATEGORIES) == EXPECTED_CATEGORIES
        assert len(DEFAULT_CATEGORIES) == 16

    def test_news_descriptor(self):
        """news 映射到 News/General 分组。"""
        news = DEFAULT_CATEGORIES.resolve("news")
        assert news.iptv_groups == ("News", "General")
        assert news.yt_query == "news live stream"
        assert news.tmdb_genre_id == 10763

    def test_unknown_category_raises(self):
        """未知分类名应抛出 UnknownCategoryError。"""
        with pytest.raises(UnknownCategoryError, match="weather"):
            DEFAULT_CATEGORIES.resolve("weather")

    def test_mapping_lookup_raises_key_error(self):
        """Mapping 协议下的查找保持 KeyError 语义。"""
        with pytest.raises(KeyError):
            DEFAULT_CATEGORIES["weather"]
        assert DEFAULT_CATEGORIES.get("weather") is None


class TestCategoryTableImmutability:
    """分类表不可变性测试。"""

    def test_descriptor_is_frozen(self):
        descriptor = DEFAULT_CATEGORIES.resolve("music")
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.yt_query = "other"  # type: ignore[misc]

    def test_table_copies_source_mapping(self):
        """构造后修改源字典不影响分类表。"""
        source = {"a": CategoryDescriptor(("A",), "a", 1)}
        table = CategoryTable(source)
        source["b"] = CategoryDescriptor(("B",), "b", 2)

        assert list(table) == ["a"]

    def test_table_rejects_item_assignment(self):
        with pytest.raises(TypeError):
            DEFAULT_CATEGORIES["news"] = None  # type: ignore[index]
