"""slackbone的实用工具函数。"""

from pathlib import Path


def ensure_dir(path: Path) -> Path:
    """
    确保目录存在，如果不存在则创建。

    Args:
        path: 目录路径

    Returns:
        目录路径（确保已存在）
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """获取slackbone数据目录路径（~/.slackbone）。"""
    return ensure_dir(Path.home() / ".slackbone")


def truncate_string(s: str, max_len: int = 80, suffix: str = "...") -> str:
    """截断字符串到最大长度，用于日志里的消息预览。"""
    if len(s) <= max_len:
        return s
    return s[: max_len - len(suffix)] + suffix
