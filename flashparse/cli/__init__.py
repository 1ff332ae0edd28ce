"""
CLI模块

包含命令行接口及其显示处理模块。
"""

from flashparse.cli.main import app, main

__all__ = ["app", "main"]
