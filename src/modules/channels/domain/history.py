"""URL history domain rules.

url_history.json 是 Roku URL 对话框里展示的书签列表，是系统中唯一跨运行持久化的状态。
"""

from typing import Any

DEFAULT_URL_HISTORY: tuple[str, ...] = (
    "https://en.wikipedia.org/wiki/Television",
    "https://en.wikipedia.org/wiki/Internet",
    "https://en.wikipedia.org/wiki/Artificial_intelligence",
    "https://en.wikipedia.org/wiki/Space_exploration",
    "https://en.wikipedia.org/wiki/Climate_change",
    "https://en.wikipedia.org/wiki/History_of_the_Internet",
    "https://en.wikipedia.org/wiki/Streaming_media",
    "https://en.wikipedia.org/wiki/Quantum_computing",
    "https://en.wikipedia.org/wiki/Renewable_energy",
    "https://en.wikipedia.org/wiki/Cryptocurrency",
)


def extract_persisted_urls(payload: Any) -> list[str]:
    """Pull the URL list out of a previously persisted history payload.

    支持两种历史格式：直接的字符串列表，或带 ``urls`` 列表成员的对象。
    非字符串元素被忽略。
    """
    if isinstance(payload, dict):
        payload = payload.get("urls")
    if not isinstance(payload, list):
        return []
    return [url for url in payload if isinstance(url, str) and url]
