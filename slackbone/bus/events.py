"""消息总线的事件类型。

- InboundMessage: Slack会话解析完成、交给分发框架的消息
- OutboundMessage: 分发框架产生、需要送回Slack的回复
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class InboundMessage:
    """
    进入总线的入站消息。

    由SlackChannel根据NormalizedMessage构造，只携带总线消费者需要的
    扁平字段；完整的身份信息放在metadata里。
    """

    channel: str  # 渠道名称，目前只有slack
    sender_id: str  # 发送者的Slack用户ID
    chat_id: str  # 私聊为发送者ID，群聊为频道ID
    content: str  # 去掉@提及后的文本
    addressed: bool = False  # 是否是对机器人说的
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def session_key(self) -> str:
        return f"{self.channel}:{self.chat_id}"


@dataclass
class OutboundMessage:
    """要发送到Slack的回复。chat_id可以是用户ID或G/C开头的频道ID。"""

    channel: str
    chat_id: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
