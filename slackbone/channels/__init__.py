"""聊天渠道模块。"""

from slackbone.channels.base import BaseChannel
from slackbone.channels.slack import SlackChannel

__all__ = ["BaseChannel", "SlackChannel"]
