"""配置加载工具。

配置文件使用JSON格式，键名使用camelCase，
在Python代码中使用snake_case（符合Pydantic规范）。
"""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from slackbone.config.schema import Config
from slackbone.utils.helpers import get_data_path


def get_config_path() -> Path:
    """
    获取默认配置文件路径。

    Returns:
        配置文件路径（~/.slackbone/config.json）
    """
    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    从文件加载配置或创建默认配置。

    文件不存在或无法解析时返回默认配置（环境变量仍然生效）。

    Args:
        config_path: 可选的配置文件路径，如果未提供则使用默认路径

    Returns:
        加载的配置对象
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """保存配置到文件，键名转换为camelCase。"""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def convert_keys(data: Any) -> Any:
    """递归地把camelCase键名转换为snake_case。"""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """递归地把snake_case键名转换为camelCase。"""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """
    将camelCase转换为snake_case。

    例如：markReadIntervalS -> mark_read_interval_s
    """
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """
    将snake_case转换为camelCase。

    例如：cache_ttl_s -> cacheTtlS
    """
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
