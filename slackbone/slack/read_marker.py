"""节流的"标记已读"。

每条消息到达时都会尝试标记已读，但最多每隔interval_s秒真正调用一次API。
这是独立于消息处理的副作用：失败只记录日志，不影响后续处理。
"""

import time
from typing import Any, Callable

from loguru import logger

from slackbone.slack.api import SlackDirectoryClient
from slackbone.slack.types import ChannelKind

DEFAULT_MARK_INTERVAL_S = 15.0


class ReadMarker:
    def __init__(
        self,
        client: SlackDirectoryClient,
        interval_s: float = DEFAULT_MARK_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.interval_s = interval_s
        self._clock = clock
        self.last_mark: float | None = None

    def _claim(self) -> bool:
        # 检查和更新之间没有await，同一事件循环里不会被其他事件打断
        now = self._clock()
        if self.last_mark is not None and now - self.last_mark < self.interval_s:
            return False
        self.last_mark = now
        return True

    async def maybe_mark_read(self, event: dict[str, Any]) -> bool:
        """
        如果距上次标记已经超过间隔，则把事件所在频道标记为已读。

        Returns:
            是否发起了标记请求
        """
        channel = event.get("channel")
        ts = event.get("ts")
        kind = ChannelKind.parse(channel)
        if kind is None or not ts:
            return False
        if not self._claim():
            return False

        try:
            res = await self.client.mark_read(kind, channel, ts)
            if not res.get("ok"):
                logger.debug(f"Slack mark read failed for {channel}: {res.get('error')}")
        except Exception as e:
            logger.debug(f"Slack mark read failed for {channel}: {e}")
        return True
