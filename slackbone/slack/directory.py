"""把Slack的不透明ID解析为身份和频道。

所有只读查询都经过IdentityCache；只有成功的响应会被缓存，
失败的信封在写入缓存前就转成NotFoundError抛出。
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from loguru import logger

from slackbone.slack.api import SlackDirectoryClient
from slackbone.slack.cache import IdentityCache
from slackbone.slack.errors import InvalidArgumentError, NotFoundError, RemoteCallFailure
from slackbone.slack.types import ChannelKind, Identity


class DirectoryResolver:
    """
    用户、私聊频道和群组的解析器。

    Args:
        client: Slack目录API客户端
        cache: 共享的TTL缓存
        own_user_id: 机器人自己的用户ID，用于计算Identity.is_self
    """

    def __init__(self, client: SlackDirectoryClient, cache: IdentityCache, own_user_id: str):
        self.client = client
        self.cache = cache
        self.own_user_id = own_user_id
        # 频道类型 -> 查询方式。新增频道类型时只需要在这里登记。
        self._channel_lookups: dict[ChannelKind, Callable[[str, str], Awaitable[dict | None]]] = {
            ChannelKind.GROUP: self._find_group,
            ChannelKind.TEAM: self._find_team_channel,
        }
        self._group_openers: dict[ChannelKind, Callable[[str], Awaitable[dict[str, Any]]]] = {
            ChannelKind.GROUP: self.client.open_group,
            ChannelKind.TEAM: self.client.join_channel,
        }

    async def resolve_user(self, by: str, value: str) -> Identity:
        """
        按ID或用户名解析用户。

        Args:
            by: "id"走users.info，"name"在完整用户列表里查找
            value: 用户ID或用户名

        Raises:
            InvalidArgumentError: by不是"id"或"name"
            NotFoundError: 用户不存在或API返回失败
        """
        if by == "id":
            res = await self._fetch(f"users.info:{value}", lambda: self.client.get_user_by_id(value))
            user = res.get("user")
        elif by == "name":
            res = await self._fetch("users.list", self.client.list_users)
            user = next((m for m in res.get("members") or [] if m.get("name") == value), None)
        else:
            raise InvalidArgumentError(f"unknown lookup type {by}")

        if not user:
            raise NotFoundError(f"unknown user {by} {value}")

        return Identity(
            username=user["id"],
            nickname=user.get("name", ""),
            is_self=user["id"] == self.own_user_id,
        )

    async def resolve_self(self) -> Identity:
        return await self.resolve_user("id", self.own_user_id)

    async def resolve_user_channel(self, by: str, value: str) -> str:
        """
        找到与某个用户的私聊频道ID。

        Args:
            by: "user"按对方用户ID查找，"id"按私聊频道ID查找
            value: 要匹配的值
        """
        if by not in ("user", "id"):
            raise InvalidArgumentError(f"unknown lookup type {by}")

        try:
            res = await self._fetch("im.list", self.client.list_im_channels)
        except NotFoundError as e:
            raise NotFoundError(f"unknown IM {by} {value}") from e

        im = next((c for c in res.get("channels") or [] if c.get(by) == value), None)
        if im is None:
            raise NotFoundError(f"unknown IM {by} {value}")
        return im["id"]

    async def resolve_channel(self, by: str, value: str) -> str:
        """
        解析群组或团队频道的ID。

        只支持按ID查找，因为群组和频道共用同一个命名空间。
        私聊（D开头）或未知前缀会抛出InvalidArgumentError。
        """
        if by != "id":
            raise InvalidArgumentError(f"unknown lookup type {by}")

        kind = ChannelKind.require(value)
        lookup = self._channel_lookups.get(kind)
        if lookup is None:
            raise InvalidArgumentError(f"unknown group type {kind.value!r}")

        try:
            channel = await lookup(by, value)
        except NotFoundError as e:
            raise NotFoundError(f"cannot find group {by} {value}") from e
        if not channel:
            raise NotFoundError(f"cannot find group {by} {value}")
        return channel["id"]

    async def join_or_open_group(self, channel_ref: str) -> None:
        """
        加入团队频道或打开私有群组。不经过缓存。

        Raises:
            InvalidArgumentError: 不是G或C开头的频道
            RemoteCallFailure: Slack拒绝了请求
        """
        kind = ChannelKind.require(channel_ref)
        opener = self._group_openers.get(kind)
        if opener is None:
            raise InvalidArgumentError(f"unknown group type {kind.value!r}")

        res = await opener(channel_ref)
        if not res.get("ok"):
            raise RemoteCallFailure("conversations.join" if kind is ChannelKind.TEAM else "conversations.open",
                                    res.get("error"))
        logger.info(f"Joined Slack {kind.name.lower()} {channel_ref}")

    async def _find_group(self, by: str, value: str) -> dict | None:
        res = await self._fetch("groups.list", self.client.list_groups)
        return next((g for g in res.get("channels") or [] if g.get(by) == value), None)

    async def _find_team_channel(self, by: str, value: str) -> dict | None:
        res = await self._fetch(f"channels.info:{value}", lambda: self.client.get_channel_info(value))
        return res.get("channel")

    async def _fetch(self, key: str, call: Callable[[], Awaitable[dict[str, Any]]]) -> dict[str, Any]:
        async def compute() -> dict[str, Any]:
            res = await call()
            if not res.get("ok"):
                raise NotFoundError(f"{key} failed: {res.get('error', 'unknown error')}")
            return res

        return await self.cache.get_or_compute(key, compute)
