"""消息总线模块，用于解耦Slack会话和分发框架。"""

from slackbone.bus.events import InboundMessage, OutboundMessage
from slackbone.bus.queue import MessageBus

__all__ = ["MessageBus", "InboundMessage", "OutboundMessage"]
