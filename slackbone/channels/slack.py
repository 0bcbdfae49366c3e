"""使用Socket模式实现的Slack渠道。

SlackChannel是连接器对外的会话：持有缓存和目录客户端，启动时通过
auth.test确认自己的身份，把实时事件交给EventRouter，并把路由器产出的
消息发布到消息总线。回复通过chat.postMessage发送。
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from loguru import logger
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.socket_mode.websockets import SocketModeClient
from slack_sdk.web.async_client import AsyncWebClient

from slackbone.bus.events import InboundMessage, OutboundMessage
from slackbone.bus.queue import MessageBus
from slackbone.channels.base import BaseChannel
from slackbone.config.schema import SlackConfig
from slackbone.slack.api import SlackDirectoryClient
from slackbone.slack.cache import IdentityCache
from slackbone.slack.directory import DirectoryResolver
from slackbone.slack.errors import RemoteCallFailure, SessionInitError, SlackboneError
from slackbone.slack.outbound import OutboundResolver
from slackbone.slack.read_marker import ReadMarker
from slackbone.slack.router import EventRouter
from slackbone.slack.types import ChannelKind, NormalizedMessage
from slackbone.utils.helpers import truncate_string

TransportErrorHandler = Callable[["SlackChannel", dict[str, Any]], None]


def log_transport_error(session: SlackChannel, payload: dict[str, Any]) -> None:
    """默认的传输错误处理：记录日志后继续运行。"""
    error = payload.get("error") or {}
    logger.warning(f"Slack Error #{error.get('code')}: {error.get('msg')}")


class SlackChannel(BaseChannel):
    """
    使用Socket模式的Slack渠道。

    事件按到达顺序放入队列，由单个消费者逐条处理；某条事件处理失败
    只会被记录并跳过，不会影响会话。
    """

    name = "slack"

    def __init__(
        self,
        config: SlackConfig,
        bus: MessageBus,
        client: SlackDirectoryClient | None = None,
        on_transport_error: TransportErrorHandler | None = None,
    ):
        super().__init__(config, bus)
        self.config: SlackConfig = config
        self.client = client
        self.on_transport_error = on_transport_error or log_transport_error
        self.cache = IdentityCache(ttl_s=config.cache_ttl_s)
        self.whoami: dict[str, Any] | None = None
        self.directory: DirectoryResolver | None = None
        self.read_marker: ReadMarker | None = None
        self.router: EventRouter | None = None
        self.outbound: OutboundResolver | None = None
        self._socket_client: SocketModeClient | None = None
        self._events: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._consumer_task: asyncio.Task | None = None

    async def initialize(self) -> None:
        """
        确认机器人身份并组装解析流水线，重复调用不会重新初始化。

        Raises:
            SessionInitError: 未配置token或auth.test失败
        """
        if self.whoami is not None:
            return

        if self.client is None:
            if not self.config.bot_token:
                raise SessionInitError("Slack bot token not configured")
            self.client = SlackDirectoryClient(AsyncWebClient(token=self.config.bot_token))

        try:
            res = await self.client.who_am_i()
        except RemoteCallFailure as e:
            raise SessionInitError(f"unable to ask Slack who am I? {e}") from e
        if not res.get("ok") or not res.get("user_id"):
            raise SessionInitError(f"unable to ask Slack who am I? {res.get('error', '')}".rstrip())

        self.whoami = res
        self.directory = DirectoryResolver(self.client, self.cache, self.user_id)
        self.read_marker = ReadMarker(self.client, interval_s=self.config.mark_read_interval_s)
        self.router = EventRouter(self.user_id, self.directory, self.read_marker, dispatcher=self, origin=self)
        self.outbound = OutboundResolver(self.directory)
        logger.info(f"Slack bot connected as {self.user} ({self.user_id})")

    @property
    def user(self) -> str:
        return self._require_whoami().get("user", "")

    @property
    def user_id(self) -> str:
        return self._require_whoami()["user_id"]

    @property
    def team_id(self) -> str:
        return self._require_whoami().get("team_id", "")

    def _require_whoami(self) -> dict[str, Any]:
        if self.whoami is None:
            raise SessionInitError("Slack session not initialized")
        return self.whoami

    async def start(self) -> None:
        """
        启动Slack Socket模式客户端。

        先初始化会话并加入配置的群组，然后连接实时事件流，
        直到stop()被调用。
        """
        if not self.config.app_token:
            raise SessionInitError("Slack app token not configured")

        await self.initialize()

        for group in self.config.join_groups:
            try:
                await self.join_group(group)
            except SlackboneError as e:
                logger.warning(f"Could not join Slack group {group}: {e}")

        self._running = True
        self._consumer_task = asyncio.create_task(self._consume_events())

        self._socket_client = SocketModeClient(
            app_token=self.config.app_token,
            web_client=self.client.web_client,
        )
        self._socket_client.socket_mode_request_listeners.append(self._on_socket_request)
        self._socket_client.message_listeners.append(self._on_socket_message)

        logger.info("Starting Slack Socket Mode client...")
        await self._socket_client.connect()

        while self._running:
            await asyncio.sleep(1)

    async def stop(self) -> None:
        self._running = False
        if self._consumer_task:
            self._consumer_task.cancel()
            try:
                await self._consumer_task
            except asyncio.CancelledError:
                pass
            self._consumer_task = None
        if self._socket_client:
            try:
                await self._socket_client.close()
            except Exception as e:
                logger.warning(f"Slack socket close failed: {e}")
            self._socket_client = None

    async def join_group(self, group: str) -> None:
        await self.initialize()
        await self.directory.join_or_open_group(group)

    async def send(self, msg: OutboundMessage) -> None:
        """
        把总线上的回复发送到Slack。

        chat_id为G/C开头时发到该频道，D开头时直接发到该私聊，
        否则视为用户ID，发到与该用户的私聊。
        """
        kind = ChannelKind.parse(msg.chat_id)
        if kind in (ChannelKind.GROUP, ChannelKind.TEAM):
            await self.send_message(msg.content, group=msg.chat_id)
        elif kind is ChannelKind.DIRECT:
            self._require_whoami()
            channel = await self.directory.resolve_user_channel("id", msg.chat_id)
            await self._post(channel, msg.content)
        else:
            await self.send_message(msg.content, to=msg.chat_id)

    async def send_message(self, text: str, to: str | None = None, group: str | None = None) -> str:
        """
        解析目标频道并发送消息。

        Args:
            text: 消息文本
            to: 接收者用户ID
            group: 群组或频道ID

        Returns:
            实际发送到的频道ID
        """
        self._require_whoami()
        channel = await self.outbound.resolve_send_target(to=to, group=group)
        await self._post(channel, text)
        return channel

    async def _post(self, channel: str, text: str) -> None:
        res = await self.client.post_message(channel, text)
        if not res.get("ok"):
            raise RemoteCallFailure("chat.postMessage", res.get("error"))

    async def dispatch(self, message: NormalizedMessage) -> None:
        """把NormalizedMessage转换为InboundMessage并发布到总线。"""
        sender = message.from_
        await self._handle_message(InboundMessage(
            channel=self.name,
            sender_id=sender.username,
            chat_id=sender.username if message.is_direct else message.group,
            content=message.text,
            addressed=message.to is not None,
            metadata={
                "slack": {
                    "nickname": sender.nickname,
                    "group": message.group,
                    "ts": message.ts,
                }
            },
        ))

    async def resend(self, message: NormalizedMessage) -> None:
        target = message.to.nickname if message.is_direct else message.group
        logger.debug(f"[slack] {message.from_.nickname} -> {target}: {truncate_string(message.text)}")

    async def handle_event(self, event: dict[str, Any]) -> NormalizedMessage | None:
        """路由一个事件；失败时记录日志并跳过该事件。"""
        try:
            return await self.router.route(event)
        except SlackboneError as e:
            logger.warning(f"Dropping Slack event {event.get('ts')} in {event.get('channel')}: {e}")
        except Exception as e:
            logger.error(f"Error handling Slack event {event.get('ts')}: {e}")
        return None

    async def _consume_events(self) -> None:
        while self._running:
            event = await self._events.get()
            await self.handle_event(event)

    async def _on_socket_request(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        """确认events_api请求并把message事件放入队列。"""
        if req.type != "events_api":
            return

        # 立即发送ACK，避免Slack重试
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))

        event = (req.payload or {}).get("event") or {}
        if event.get("type") != "message":
            return

        logger.debug(
            "Slack event: subtype={} user={} channel={} text={}",
            event.get("subtype"),
            event.get("user"),
            event.get("channel"),
            (event.get("text") or "")[:80],
        )
        await self._events.put(event)

    async def _on_socket_message(self, client: SocketModeClient, message: dict, raw_message: str | None) -> None:
        if message.get("type") == "error":
            self.on_transport_error(self, message)
