"""
Pytest 配置和共享 fixtures

提供测试中使用的共享 fixtures 和配置。
"""

import os
from typing import Generator

import pytest
from loguru import logger


@pytest.fixture()
def basic_response() -> str:
    """三张标准管道分隔卡片"""
    return "apple | appel\nbread | brood\ncheese | kaas"


@pytest.fixture()
def noisy_response() -> str:
    """带开场白、编号、markdown、表头和重复内容的典型模型输出"""
    return "\n".join(
        [
            "Sure! Here are your flashcards:",
            "",
            "Term | Translation",
            "1. **apple** | appel",
            "2. _bread_ | brood (bread)",
            "3) cheese: kaas",
            "- milk - melk",
            "1, 2, 3, 4",
            "apple | appel",
            "This line is just explanatory prose that the model added at the end, "
            "describing how the cards were created for you.",
        ]
    )


@pytest.fixture()
def tmp_output_dir(tmp_path):
    """返回临时输出目录"""
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    return output_dir


@pytest.fixture(autouse=True)
def _reset_env() -> Generator[None, None, None]:
    """在每个测试前后重置环境变量"""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def _reset_logger() -> Generator[None, None, None]:
    """测试结束后移除 CLI 添加的日志处理器，避免写入已关闭的流"""
    yield
    logger.remove()
