"""Shared fixtures: an in-memory Slack directory and a controllable clock."""

from typing import Any

import pytest

from slackbone.bus.queue import MessageBus
from slackbone.slack.cache import IdentityCache
from slackbone.slack.directory import DirectoryResolver
from slackbone.slack.types import ChannelKind


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDirectoryClient:
    """Mimics SlackDirectoryClient, recording every call."""

    def __init__(self):
        self.users: dict[str, dict[str, Any]] = {
            "U0": {"id": "U0", "name": "bot"},
            "U1": {"id": "U1", "name": "alice"},
            "U2": {"id": "U2", "name": "bob"},
        }
        self.ims: list[dict[str, Any]] = [
            {"id": "D1", "user": "U1"},
            {"id": "D2", "user": "U2"},
        ]
        self.groups: list[dict[str, Any]] = [
            {"id": "G1", "name": "secret"},
            {"id": "G2", "name": "mpdm-alice--bob-1", "is_mpim": True},
        ]
        self.channels: dict[str, dict[str, Any]] = {"C1": {"id": "C1", "name": "general"}}
        self.whoami: dict[str, Any] = {"ok": True, "user": "bot", "user_id": "U0", "team_id": "T0"}
        self.fail: set[str] = set()
        self.calls: list[tuple] = []
        self.posted: list[tuple[str, str]] = []
        self.web_client = None

    def _envelope(self, method: str, **payload: Any) -> dict[str, Any]:
        if method in self.fail:
            return {"ok": False, "error": "fatal_error"}
        return {"ok": True, **payload}

    async def who_am_i(self) -> dict[str, Any]:
        self.calls.append(("who_am_i",))
        if "who_am_i" in self.fail:
            return {"ok": False, "error": "invalid_auth"}
        return dict(self.whoami)

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        self.calls.append(("get_user_by_id", user_id))
        if user_id not in self.users:
            return {"ok": False, "error": "user_not_found"}
        return self._envelope("get_user_by_id", user=self.users[user_id])

    async def list_users(self) -> dict[str, Any]:
        self.calls.append(("list_users",))
        return self._envelope("list_users", members=list(self.users.values()))

    async def list_im_channels(self) -> dict[str, Any]:
        self.calls.append(("list_im_channels",))
        return self._envelope("list_im_channels", channels=list(self.ims))

    async def list_groups(self) -> dict[str, Any]:
        self.calls.append(("list_groups",))
        return self._envelope("list_groups", channels=list(self.groups))

    async def get_channel_info(self, channel_id: str) -> dict[str, Any]:
        self.calls.append(("get_channel_info", channel_id))
        if channel_id not in self.channels:
            return {"ok": False, "error": "channel_not_found"}
        return self._envelope("get_channel_info", channel=self.channels[channel_id])

    async def mark_read(self, kind: ChannelKind, channel: str, ts: str) -> dict[str, Any]:
        self.calls.append(("mark_read", kind, channel, ts))
        return self._envelope("mark_read")

    async def join_channel(self, name: str) -> dict[str, Any]:
        self.calls.append(("join_channel", name))
        return self._envelope("join_channel", channel={"id": name})

    async def open_group(self, channel: str) -> dict[str, Any]:
        self.calls.append(("open_group", channel))
        return self._envelope("open_group")

    async def post_message(self, channel: str, text: str) -> dict[str, Any]:
        self.calls.append(("post_message", channel, text))
        res = self._envelope("post_message", channel=channel, ts="1700000000.000100")
        if res["ok"]:
            self.posted.append((channel, text))
        return res

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)


class RecordingDispatcher:
    def __init__(self):
        self.dispatched: list = []
        self.resent: list = []

    async def dispatch(self, message) -> None:
        self.dispatched.append(message)

    async def resend(self, message) -> None:
        self.resent.append(message)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client() -> FakeDirectoryClient:
    return FakeDirectoryClient()


@pytest.fixture
def cache(clock: FakeClock) -> IdentityCache:
    return IdentityCache(ttl_s=60, clock=clock)


@pytest.fixture
def directory(client: FakeDirectoryClient, cache: IdentityCache) -> DirectoryResolver:
    return DirectoryResolver(client, cache, own_user_id="U0")


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def bus() -> MessageBus:
    return MessageBus()
