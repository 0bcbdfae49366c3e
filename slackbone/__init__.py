"""
slackbone - 把Slack实时事件接入机器人分发框架的连接器
"""

__version__ = "0.1.0"
__logo__ = "🦴"
