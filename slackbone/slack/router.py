"""入站实时事件的路由。

每个事件独立走一遍流水线：

    标记已读 -> 过滤subtype/编辑 -> 按频道类型分流 -> 解析身份 -> 分发

解析失败（NotFoundError、RemoteCallFailure）不会在这里被吞掉，
由持有路由器的会话决定记录后跳过还是上报。
"""

from typing import Any

from loguru import logger

from slackbone.slack.directory import DirectoryResolver
from slackbone.slack.mention import MentionDetector
from slackbone.slack.read_marker import ReadMarker
from slackbone.slack.types import ChannelKind, Dispatcher, NormalizedMessage


class EventRouter:
    """
    把Slack的message事件转换成NormalizedMessage并交给分发框架。

    Args:
        own_user_id: 机器人自己的用户ID
        directory: 身份和频道解析器
        read_marker: 节流的标记已读
        dispatcher: 分发框架
        origin: 写入NormalizedMessage.origin的会话对象
    """

    def __init__(
        self,
        own_user_id: str,
        directory: DirectoryResolver,
        read_marker: ReadMarker,
        dispatcher: Dispatcher,
        origin: Any = None,
    ):
        self.own_user_id = own_user_id
        self.directory = directory
        self.read_marker = read_marker
        self.dispatcher = dispatcher
        self.origin = origin

    async def route(self, event: dict[str, Any]) -> NormalizedMessage | None:
        """
        处理一个入站事件。

        Returns:
            已分发的消息；事件被丢弃时返回None
        """
        await self.read_marker.maybe_mark_read(event)

        if event.get("subtype"):
            logger.debug(f"Ignoring Slack message subtype {event.get('subtype')}")
            return None
        if event.get("edited"):
            logger.debug("Ignoring Slack message edit")
            return None

        if event.get("user") == self.own_user_id:
            return None

        if ChannelKind.parse(event.get("channel")) is ChannelKind.DIRECT:
            message = await self._direct_message(event)
        else:
            message = await self._group_message(event)

        await self.dispatcher.resend(message)
        await self.dispatcher.dispatch(message)
        return message

    async def _direct_message(self, event: dict[str, Any]) -> NormalizedMessage:
        return NormalizedMessage(
            from_=await self.directory.resolve_user("id", event.get("user")),
            to=await self.directory.resolve_self(),
            group=None,
            text=event.get("text") or "",
            origin=self.origin,
            ts=event.get("ts"),
        )

    async def _group_message(self, event: dict[str, Any]) -> NormalizedMessage:
        me = await self.directory.resolve_self()
        mention = MentionDetector(me.nickname, user_id=me.username).detect(event.get("text") or "")

        return NormalizedMessage(
            from_=await self.directory.resolve_user("id", event.get("user")),
            to=me if mention.addressed else None,
            group=await self.directory.resolve_channel("id", event.get("channel")),
            text=mention.stripped,
            origin=self.origin,
            ts=event.get("ts"),
        )
