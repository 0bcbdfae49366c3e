"""Slack连接器使用的数据结构。

Slack的频道ID用首字母区分类型：

    D - 私聊（IM）频道
    G - 私有群组
    C - 团队（公开）频道

这一约定只在ChannelKind里解析一次，其他模块都使用枚举值。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from slackbone.slack.errors import InvalidArgumentError


class ChannelKind(Enum):
    DIRECT = "D"
    GROUP = "G"
    TEAM = "C"

    @classmethod
    def parse(cls, ref: str | None) -> ChannelKind | None:
        """根据频道ID首字母得到类型，未知前缀返回None。"""
        if not ref:
            return None
        return _PREFIXES.get(ref[0])

    @classmethod
    def require(cls, ref: str | None) -> ChannelKind:
        kind = cls.parse(ref)
        if kind is None:
            prefix = ref[:1] if ref else ""
            raise InvalidArgumentError(f"unknown group type {prefix!r}")
        return kind


_PREFIXES: dict[str, ChannelKind] = {kind.value: kind for kind in ChannelKind}


@dataclass(frozen=True)
class Identity:
    """
    解析后的Slack用户。

    is_self在每次解析时根据会话自己的用户ID计算，不做缓存。
    """

    username: str  # Slack用户ID，例如U024BE7LH
    nickname: str  # 显示用的name字段
    is_self: bool = False


@dataclass
class NormalizedMessage:
    """
    交给分发框架的标准化消息。

    私聊：to为机器人自己，group为None。
    群聊：group为频道ID；只有@了机器人时to才是机器人自己。
    """

    from_: Identity
    to: Identity | None
    group: str | None
    text: str
    origin: Any = field(default=None, repr=False)  # 产生该消息的会话
    ts: str | None = None  # Slack消息时间戳

    @property
    def is_direct(self) -> bool:
        return self.group is None

    @property
    def is_addressed(self) -> bool:
        return self.to is not None and self.to.is_self


class Dispatcher(Protocol):
    """外部分发框架需要实现的接口。"""

    async def dispatch(self, message: NormalizedMessage) -> None: ...

    async def resend(self, message: NormalizedMessage) -> None: ...
