"""
slackbone模块的入口点

当使用 `python -m slackbone` 命令运行时，会执行此文件。
"""

from slackbone.cli.commands import app

if __name__ == "__main__":
    app()
