"""使用Pydantic的配置模式定义。

所有配置类都继承自Pydantic的BaseModel；根配置Config继承BaseSettings，
因此每一项都可以用SLACKBONE_前缀的环境变量覆盖，例如
SLACKBONE_SLACK__BOT_TOKEN。
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class SlackConfig(BaseModel):
    """Slack connector configuration."""
    enabled: bool = True
    bot_token: str = ""  # xoxb-...
    app_token: str = ""  # xapp-...，Socket模式需要
    cache_ttl_s: float = 60.0  # 目录查询缓存时间，避免触发限流
    mark_read_interval_s: float = 15.0  # 标记已读的最小间隔
    join_groups: list[str] = Field(default_factory=list)  # 启动时加入/打开的G或C频道ID
    allow_from: list[str] = Field(default_factory=list)  # 允许的Slack用户ID，空表示不限制


class LoggingConfig(BaseModel):
    """日志配置。"""
    level: str = "INFO"


class Config(BaseSettings):
    """
    slackbone的根配置类。

    支持从环境变量加载配置（通过SLACKBONE_前缀）。
    """
    slack: SlackConfig = Field(default_factory=SlackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="SLACKBONE_",
        env_nested_delimiter="__"
    )
