"""Tests for SlackDirectoryClient envelope handling."""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from slack_sdk.errors import SlackApiError

from slackbone.slack.api import SlackDirectoryClient
from slackbone.slack.errors import RemoteCallFailure
from slackbone.slack.types import ChannelKind


def response(**data):
    return MagicMock(data={"ok": True, **data})


@pytest.fixture
def web_client():
    return MagicMock()


@pytest.fixture
def api(web_client):
    return SlackDirectoryClient(web_client)


@pytest.mark.asyncio
async def test_returns_envelope(api, web_client):
    web_client.users_info = AsyncMock(return_value=response(user={"id": "U1", "name": "alice"}))
    res = await api.get_user_by_id("U1")
    assert res == {"ok": True, "user": {"id": "U1", "name": "alice"}}
    web_client.users_info.assert_awaited_once_with(user="U1")


@pytest.mark.asyncio
async def test_api_error_folded_into_envelope(api, web_client):
    error_response = MagicMock(data={"ok": False, "error": "user_not_found"})
    web_client.users_info = AsyncMock(side_effect=SlackApiError("user_not_found", error_response))
    res = await api.get_user_by_id("U404")
    assert res == {"ok": False, "error": "user_not_found"}


@pytest.mark.asyncio
async def test_transport_error_raises(api, web_client):
    web_client.auth_test = AsyncMock(side_effect=aiohttp.ClientConnectionError("reset"))
    with pytest.raises(RemoteCallFailure) as exc:
        await api.who_am_i()
    assert exc.value.method == "auth.test"


@pytest.mark.asyncio
async def test_list_follows_cursor(api, web_client):
    web_client.conversations_list = AsyncMock(side_effect=[
        response(channels=[{"id": "D1"}], response_metadata={"next_cursor": "abc"}),
        response(channels=[{"id": "D2"}], response_metadata={"next_cursor": ""}),
    ])
    res = await api.list_im_channels()
    assert res == {"ok": True, "channels": [{"id": "D1"}, {"id": "D2"}]}
    second_call = web_client.conversations_list.await_args_list[1]
    assert second_call.kwargs["cursor"] == "abc"
    assert second_call.kwargs["types"] == "im"


@pytest.mark.asyncio
async def test_list_page_failure(api, web_client):
    web_client.users_list = AsyncMock(return_value=MagicMock(data={"ok": False, "error": "ratelimited"}))
    res = await api.list_users()
    assert res["ok"] is False


@pytest.mark.asyncio
async def test_groups_include_private_channels_and_mpims(api, web_client):
    web_client.conversations_list = AsyncMock(return_value=response(channels=[{"id": "G1"}]))
    await api.list_groups()
    assert web_client.conversations_list.await_args.kwargs["types"] == "private_channel,mpim"


@pytest.mark.asyncio
async def test_mark_read_and_post(api, web_client):
    web_client.conversations_mark = AsyncMock(return_value=response())
    web_client.chat_postMessage = AsyncMock(return_value=response(ts="1.0"))

    await api.mark_read(ChannelKind.GROUP, "G1", "1.0")
    await api.post_message("C1", "hi")

    web_client.conversations_mark.assert_awaited_once_with(channel="G1", ts="1.0")
    web_client.chat_postMessage.assert_awaited_once_with(channel="C1", text="hi")
