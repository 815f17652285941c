"""Category table domain models.

分类表是所有抓取器与合并逻辑共用的唯一配置来源：每个固定分类名映射到
iptv-org 分组名、YouTube 搜索词与 TMDB 类型 ID。
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from src.modules.channels.domain.exceptions import UnknownCategoryError


@dataclass(frozen=True)
class CategoryDescriptor:
    """Query descriptor for one category."""

    iptv_groups: tuple[str, ...]
    yt_query: str
    tmdb_genre_id: int


class CategoryTable(Mapping[str, CategoryDescriptor]):
    """Immutable, ordered category name -> descriptor mapping.

    声明顺序有意义：合并输出的分类顺序、TMDB 类型 ID 的占用顺序都依赖它。
    """

    def __init__(self, categories: Mapping[str, CategoryDescriptor]):
        self._categories = MappingProxyType(dict(categories))

    def __getitem__(self, name: str) -> CategoryDescriptor:
        return self._categories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __repr__(self) -> str:
        return f"CategoryTable({list(self._categories)!r})"

    def resolve(self, name: str) -> CategoryDescriptor:
        """Return descriptor for a category, raising if the name is unknown."""
        descriptor = self._categories.get(name)
        if descriptor is None:
            raise UnknownCategoryError(name)
        return descriptor


# TMDB genre ids: https://api.themoviedb.org/3/genre/tv/list
DEFAULT_CATEGORIES = CategoryTable(
    {
        "news": CategoryDescriptor(("News", "General"), "news live stream", 10763),
        "technology": CategoryDescriptor(
            ("Science / Technology",), "technology documentary", 10759
        ),
        "science": CategoryDescriptor(
            ("Science / Technology",), "science documentary", 99
        ),
        "history": CategoryDescriptor(("Education",), "history documentary", 99),
        "sports": CategoryDescriptor(("Sports",), "sports live stream", 10759),
        "music": CategoryDescriptor(("Music",), "music live stream", 10749),
        "entertainment": CategoryDescriptor(
            ("Entertainment", "Lifestyle"), "entertainment live stream", 10751
        ),
        "nature": CategoryDescriptor(
            ("Science / Technology",), "nature wildlife documentary", 99
        ),
        "cooking": CategoryDescriptor(("Lifestyle",), "cooking show", 10751),
        "travel": CategoryDescriptor(("Travel",), "travel documentary", 10749),
        "politics": CategoryDescriptor(
            ("News", "General"), "politics documentary", 10763
        ),
        "business": CategoryDescriptor(
            ("Business",), "business finance documentary", 10763
        ),
        "health": CategoryDescriptor(
            ("Lifestyle",), "health wellness documentary", 10751
        ),
        "kids": CategoryDescriptor(("Kids",), "kids educational show", 10762),
        "animation": CategoryDescriptor(("Animation",), "animation show", 16),
        "general": CategoryDescriptor(("General",), "documentary", 99),
    }
)
