"""Slack Web API（目录API）的薄封装。

每个方法都返回Slack的响应信封（带ok字段的dict）。SlackApiError会被折叠
回它自己的信封，调用方只需要检查ok；网络层面的失败抛出RemoteCallFailure。
列表类接口按cursor自动翻页。
"""

import asyncio
from typing import Any

import aiohttp
from loguru import logger
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from slackbone.slack.errors import RemoteCallFailure
from slackbone.slack.types import ChannelKind

PAGE_LIMIT = 200


class SlackDirectoryClient:
    """
    用户、频道查询以及发送、标记已读等调用。

    Args:
        web_client: 已配置好token的AsyncWebClient
    """

    def __init__(self, web_client: AsyncWebClient):
        self.web_client = web_client

    async def who_am_i(self) -> dict[str, Any]:
        return await self._call("auth_test")

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        return await self._call("users_info", user=user_id)

    async def list_users(self) -> dict[str, Any]:
        return await self._paginate("users_list", "members")

    async def list_im_channels(self) -> dict[str, Any]:
        return await self._paginate("conversations_list", "channels", types="im")

    async def list_groups(self) -> dict[str, Any]:
        return await self._paginate("conversations_list", "channels", types="private_channel,mpim")

    async def get_channel_info(self, channel_id: str) -> dict[str, Any]:
        return await self._call("conversations_info", channel=channel_id)

    async def mark_read(self, kind: ChannelKind, channel: str, ts: str) -> dict[str, Any]:
        # conversations.mark accepts every channel kind
        logger.debug(f"Marking {kind.name.lower()} channel {channel} read at {ts}")
        return await self._call("conversations_mark", channel=channel, ts=ts)

    async def join_channel(self, name: str) -> dict[str, Any]:
        return await self._call("conversations_join", channel=name)

    async def open_group(self, channel: str) -> dict[str, Any]:
        return await self._call("conversations_open", channel=channel)

    async def post_message(self, channel: str, text: str) -> dict[str, Any]:
        return await self._call("chat_postMessage", channel=channel, text=text)

    async def _call(self, method: str, **kwargs: Any) -> dict[str, Any]:
        api_name = method.replace("_", ".", 1)
        try:
            response = await getattr(self.web_client, method)(**kwargs)
        except SlackApiError as e:
            data = e.response.data if e.response is not None else None
            if isinstance(data, dict):
                logger.debug(f"Slack API {api_name} returned error: {data.get('error')}")
                return dict(data)
            return {"ok": False, "error": str(e)}
        except (SlackClientError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteCallFailure(api_name, str(e)) from e
        return dict(response.data)

    async def _paginate(self, method: str, key: str, **kwargs: Any) -> dict[str, Any]:
        """把cursor分页的结果合并成一个信封，任何一页失败则返回该页的信封。"""
        items: list[Any] = []
        cursor: str | None = None
        while True:
            page = await self._call(method, limit=PAGE_LIMIT, cursor=cursor, **kwargs)
            if not page.get("ok"):
                return page
            items.extend(page.get(key) or [])
            cursor = (page.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                return {"ok": True, key: items}
