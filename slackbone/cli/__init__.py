"""slackbone命令行。"""
