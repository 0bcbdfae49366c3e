"""Slack连接器的异常类型。"""


class SlackboneError(Exception):
    """所有slackbone异常的基类。"""


class InvalidArgumentError(SlackboneError, ValueError):
    """不支持的查询方式或格式错误的目标，属于调用方错误，不重试。"""


class NotFoundError(SlackboneError, LookupError):
    """目录中不存在要解析的用户、频道或私聊。"""


class RemoteCallFailure(SlackboneError):
    """Slack API返回失败，或者请求在传输层失败。"""

    def __init__(self, method: str, error: str | None = None):
        self.method = method
        self.error = error
        super().__init__(f"Slack API {method} failed: {error or 'unknown error'}")


class SessionInitError(SlackboneError):
    """启动时无法确认机器人自己的身份（auth.test失败）。"""
