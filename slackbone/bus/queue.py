"""连接Slack会话和分发框架的异步消息总线。

入站队列由SlackChannel写入、由机器人逻辑消费；出站队列反过来，
由dispatch_outbound按渠道名称分发给订阅者。
"""

import asyncio
from typing import Awaitable, Callable

from loguru import logger

from slackbone.bus.events import InboundMessage, OutboundMessage

OutboundHandler = Callable[[OutboundMessage], Awaitable[None]]


class MessageBus:
    """
    异步消息总线。

    - inbound: 渠道 -> 机器人逻辑
    - outbound: 机器人逻辑 -> 渠道
    """

    def __init__(self):
        self.inbound: asyncio.Queue[InboundMessage] = asyncio.Queue()
        self.outbound: asyncio.Queue[OutboundMessage] = asyncio.Queue()
        self._subscribers: dict[str, list[OutboundHandler]] = {}
        self._running = False

    async def publish_inbound(self, msg: InboundMessage) -> None:
        await self.inbound.put(msg)

    async def consume_inbound(self) -> InboundMessage:
        """阻塞直到有入站消息可用。"""
        return await self.inbound.get()

    async def publish_outbound(self, msg: OutboundMessage) -> None:
        await self.outbound.put(msg)

    def subscribe_outbound(self, channel: str, callback: OutboundHandler) -> None:
        """
        订阅某个渠道的出站消息。

        Args:
            channel: 渠道名称
            callback: 接收OutboundMessage的协程函数
        """
        self._subscribers.setdefault(channel, []).append(callback)

    async def dispatch_outbound(self) -> None:
        """
        把出站消息分发给订阅者，作为后台任务运行直到stop()。

        单条消息发送失败只记录错误，不会中断分发循环。
        """
        self._running = True
        while self._running:
            try:
                msg = await asyncio.wait_for(self.outbound.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            subscribers = self._subscribers.get(msg.channel, [])
            if not subscribers:
                logger.warning(f"No subscriber for outbound channel {msg.channel}")
            for callback in subscribers:
                try:
                    await callback(msg)
                except Exception as e:
                    logger.error(f"Error dispatching to {msg.channel}: {e}")

    def stop(self) -> None:
        self._running = False
