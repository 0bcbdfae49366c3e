"""Slack消息接入与身份解析。

EventRouter把实时事件变成NormalizedMessage，DirectoryResolver通过
短TTL的IdentityCache解析ID，OutboundResolver负责回复的目标频道。
"""

from slackbone.slack.api import SlackDirectoryClient
from slackbone.slack.cache import IdentityCache
from slackbone.slack.directory import DirectoryResolver
from slackbone.slack.errors import (
    InvalidArgumentError,
    NotFoundError,
    RemoteCallFailure,
    SessionInitError,
    SlackboneError,
)
from slackbone.slack.mention import MentionDetector, MentionResult, detect_mention
from slackbone.slack.outbound import OutboundResolver
from slackbone.slack.read_marker import ReadMarker
from slackbone.slack.router import EventRouter
from slackbone.slack.types import ChannelKind, Identity, NormalizedMessage

__all__ = [
    "ChannelKind",
    "DirectoryResolver",
    "EventRouter",
    "Identity",
    "IdentityCache",
    "InvalidArgumentError",
    "MentionDetector",
    "MentionResult",
    "NormalizedMessage",
    "NotFoundError",
    "OutboundResolver",
    "ReadMarker",
    "RemoteCallFailure",
    "SessionInitError",
    "SlackDirectoryClient",
    "SlackboneError",
    "detect_mention",
]
