"""把出站回复的目标（用户或群组）解析成具体的频道ID。"""

from slackbone.slack.directory import DirectoryResolver
from slackbone.slack.errors import InvalidArgumentError


class OutboundResolver:
    def __init__(self, directory: DirectoryResolver):
        self.directory = directory

    async def resolve_send_target(self, to: str | None = None, group: str | None = None) -> str:
        """
        Args:
            to: 接收者的用户ID，发到与其的私聊频道
            group: G或C开头的频道ID

        Raises:
            InvalidArgumentError: to和group必须恰好给出一个
        """
        if (to is None) == (group is None):
            raise InvalidArgumentError("exactly one of 'to' or 'group' is required")
        if group is not None:
            return await self.directory.resolve_channel("id", group)
        return await self.directory.resolve_user_channel("user", to)
