"""检测群聊消息是否是对机器人说的。

支持三种写法，合并成一个正则，只删除最靠左的一处：

    bot: hello         开头点名，后面跟 : , - 之一
    hello, @bot!       结尾点名
    hello, bot, hi     句中的呼格

匹配到的片段会从文本中删除，其余部分保持原样。
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class MentionResult:
    stripped: str
    addressed: bool


def _name_pattern(nickname: str, user_id: str | None) -> str:
    name = rf"@?{re.escape(nickname)}"
    if user_id:
        name = rf"(?:{name}|<@{re.escape(user_id)}>)"
    return name


def _pattern(nickname: str, user_id: str | None) -> re.Pattern[str]:
    name = _name_pattern(nickname, user_id)
    leading = rf"@?{re.escape(nickname)}\s*[:,\-]"
    if user_id:
        # <@U123> 本身就是点名，后面的标点可以省略
        leading = rf"(?:{leading}|<@{re.escape(user_id)}>\s*[:,\-]?)"
    return re.compile(
        rf"^{leading}\s*"
        rf"|(?:^|\s*,\s*|\s+){name}[.!?]?$"
        rf"|,\s*{name}\s*,"
    )


def detect_mention(nickname: str, text: str, user_id: str | None = None) -> MentionResult:
    """
    检测并去掉对机器人的点名。

    Args:
        nickname: 机器人的昵称，区分大小写
        text: 原始消息文本
        user_id: 可选的机器人用户ID，用于识别Slack原生的<@U123>提及

    Returns:
        MentionResult，未匹配时stripped为原文本
    """
    if not nickname or not text:
        return MentionResult(stripped=text or "", addressed=False)

    match = _pattern(nickname, user_id).search(text)
    if match is None:
        return MentionResult(stripped=text, addressed=False)
    return MentionResult(stripped=text[:match.start()] + text[match.end():], addressed=True)


class MentionDetector:
    """绑定了机器人昵称的检测器。"""

    def __init__(self, nickname: str, user_id: str | None = None):
        self.nickname = nickname
        self.user_id = user_id

    def detect(self, text: str) -> MentionResult:
        return detect_mention(self.nickname, text, self.user_id)
