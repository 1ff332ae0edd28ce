"""
提示词构建模块

负责为调用方渲染发送给模型的少样本提示词。本模块只构建文本，不调用模型。
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from flashparse.core.card_builder import validate_requested_count
from flashparse.exceptions import TemplateError, ValidationError
from flashparse.models.config import ParserConfig

MIN_DESCRIPTION_LENGTH = 3


def get_prompts_dir() -> Path:
    """获取提示词模板目录"""
    return Path(__file__).parent.parent / "prompts"


def get_examples_path() -> Path:
    """获取示例卡片文件路径"""
    return Path(__file__).parent.parent / "config" / "examples.yaml"


def planned_request_count(card_count: int, overgeneration_factor: float) -> int:
    """
    计算实际向模型请求的卡片数量

    过滤和去重会丢掉一部分输出，因此按倍数多请求一些。

    Args:
        card_count: 用户需要的卡片数量
        overgeneration_factor: 放大倍数

    Returns:
        向上取整后的请求数量
    """
    return math.ceil(card_count * overgeneration_factor)


class PromptBuilder:
    """提示词构建器

    根据描述中的关键词挑选示例卡片和模板变体。
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        examples_path: Optional[Path] = None,
    ) -> None:
        """
        初始化提示词构建器

        Args:
            config: 解析器配置（提供放大倍数和数量上限）
            examples_path: 示例卡片文件路径，为None时使用内置文件
        """
        self.config = config or ParserConfig()
        self.env = Environment(
            loader=FileSystemLoader(str(get_prompts_dir())),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.examples = self._load_examples(examples_path or get_examples_path())

    def _load_examples(self, examples_path: Path) -> Dict[str, Any]:
        if not examples_path.exists():
            raise TemplateError(f"示例卡片文件不存在: {examples_path}")

        try:
            with open(examples_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise TemplateError(f"示例卡片文件解析失败: {e}") from e

        if not data.get("default", {}).get("cards"):
            raise TemplateError(f"示例卡片文件缺少 default.cards: {examples_path}")

        logger.debug(f"已加载示例卡片: {examples_path}")
        return data

    def select_examples(self, description: str) -> List[str]:
        """
        按描述关键词选择示例卡片

        Args:
            description: 用户的主题描述

        Returns:
            示例卡片行列表
        """
        description_lower = description.lower()
        for topic in self.examples.get("topics", []):
            if any(keyword in description_lower for keyword in topic.get("keywords", [])):
                logger.debug(f"使用主题示例: {topic.get('name')}")
                return list(topic.get("cards", []))
        return list(self.examples["default"]["cards"])

    @staticmethod
    def select_template(description: str) -> str:
        """
        按描述选择模板变体

        Args:
            description: 用户的主题描述

        Returns:
            模板文件名
        """
        description_lower = description.lower()
        if "dutch" in description_lower and "english" in description_lower:
            return "dutch_english.j2"
        if "translation" in description_lower or "english" in description_lower:
            return "translation.j2"
        return "default.j2"

    def render(self, description: str, card_count: int) -> str:
        """
        渲染提示词

        Args:
            description: 用户的主题描述
            card_count: 用户需要的卡片数量

        Returns:
            渲染后的提示词

        Raises:
            ValidationError: 描述过短或数量无效
            TemplateError: 模板加载或渲染失败
        """
        if not isinstance(description, str) or len(description.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(f"描述至少需要 {MIN_DESCRIPTION_LENGTH} 个字符")
        validate_requested_count(card_count, self.config.max_requested_cards)

        request_count = planned_request_count(card_count, self.config.overgeneration_factor)
        template_name = self.select_template(description)

        try:
            template = self.env.get_template(template_name)
            return template.render(
                examples=self.select_examples(description),
                request_count=request_count,
                description=description.strip(),
            )
        except Exception as e:
            raise TemplateError(f"渲染模板失败: {e}") from e
