"""聊天渠道的抽象基类。

渠道负责连接聊天平台、把入站消息发布到消息总线、
以及把总线上的出站消息发送回平台。
"""

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from slackbone.bus.events import InboundMessage, OutboundMessage
from slackbone.bus.queue import MessageBus


class BaseChannel(ABC):
    """
    聊天渠道实现的抽象基类。

    实现类需要：
    - 连接到聊天平台并监听入站消息
    - 通过_handle_message()把消息转发到总线
    - 实现send()把出站消息发送到平台
    """

    name: str = "base"

    def __init__(self, config: Any, bus: MessageBus):
        """
        Args:
            config: 渠道特定的配置对象
            bus: 用于通信的消息总线
        """
        self.config = config
        self.bus = bus
        self._running = False

    @abstractmethod
    async def start(self) -> None:
        """启动渠道并开始监听消息，这是一个长期运行的任务。"""

    @abstractmethod
    async def stop(self) -> None:
        """断开连接并清理资源。"""

    @abstractmethod
    async def send(self, msg: OutboundMessage) -> None:
        """通过此渠道发送消息，失败时抛出异常。"""

    def is_allowed(self, sender_id: str) -> bool:
        """
        检查发送者是否被允许使用此机器人。

        allow_from为空时允许所有人。
        """
        allow_list = getattr(self.config, "allow_from", [])
        if not allow_list:
            return True
        return str(sender_id) in allow_list

    async def _handle_message(self, msg: InboundMessage) -> bool:
        """
        检查权限并把消息发布到总线。

        Returns:
            消息是否被发布
        """
        if not self.is_allowed(msg.sender_id):
            logger.warning(
                f"Access denied for sender {msg.sender_id} on channel {self.name}. "
                f"Add them to allowFrom list in config to grant access."
            )
            return False

        await self.bus.publish_inbound(msg)
        return True

    @property
    def is_running(self) -> bool:
        return self._running
