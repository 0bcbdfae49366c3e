"""
本地直接启动 slackbone 的入口脚本。

用法示例（在项目根目录运行）：

    python run.py status
    python run.py run --echo
"""

from slackbone.cli.commands import app


if __name__ == "__main__":
    app()
