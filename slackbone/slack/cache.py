"""短TTL的目录查询缓存。

Slack对users.info、conversations.list等接口有限流，而同一批用户和频道
会被反复查询。这里只缓存API返回的原始数据，60秒后过期，
过期后的下一次查询会重新请求一次。
"""

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger

DEFAULT_TTL_S = 60.0


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float


class IdentityCache:
    """
    按键缓存API响应，只按时间过期，没有容量上限。

    条目写入后不会被修改，刷新时整体替换。并发的未命中会各自请求一次，
    后写入的覆盖先写入的。
    """

    def __init__(self, ttl_s: float = DEFAULT_TTL_S, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """返回未过期的值，否则返回None。"""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(key, value, self._clock() + self.ttl_s)

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        """
        命中时直接返回缓存值；未命中或已过期时调用compute并缓存结果。

        compute抛出异常时不写入缓存，异常原样抛出。

        Args:
            key: 缓存键，例如"users.info:U123"
            compute: 返回新值的协程函数

        Returns:
            缓存或新计算的值
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Cache miss: {key}")
        value = await compute()
        self.set(key, value)
        return value

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
