"""slackbone配置模块。"""

from slackbone.config.loader import get_config_path, load_config
from slackbone.config.schema import Config, SlackConfig

__all__ = ["Config", "SlackConfig", "load_config", "get_config_path"]
