"""
卡片批次构建模块

调用方一侧的策略层：解析模型响应、必要时启用宽松解析、去重、截断到请求数量，
并根据产出率给出成功、不足或低产出提示。低产出只是软警告，卡片照常返回。
"""

from typing import List, Optional

from loguru import logger

from flashparse.core.diagnostics import DiagnosticHook
from flashparse.core.response_parser import ResponseParser
from flashparse.exceptions import ValidationError
from flashparse.models.card import Card
from flashparse.models.config import ParserConfig
from flashparse.models.result import GenerationResult, GenerationStatus

DEBUG_SNIPPET_LENGTH = 500

EMPTY_RESULT_ERROR = (
    "无法从模型响应中解析出有效卡片。请尝试更简单、更具体的描述"
    '（例如 "Dutch food words" 或 "Spanish greetings"）。期望格式: "front | back"。'
)


def validate_requested_count(requested_count: int, max_requested_cards: int) -> None:
    """
    验证请求的卡片数量

    Args:
        requested_count: 请求的卡片数量
        max_requested_cards: 允许的最大数量

    Raises:
        ValidationError: 数量不在 [1, max_requested_cards] 范围内
    """
    if (
        isinstance(requested_count, bool)
        or not isinstance(requested_count, int)
        or not 1 <= requested_count <= max_requested_cards
    ):
        raise ValidationError(
            f"卡片数量必须在 1 到 {max_requested_cards} 之间，实际为 {requested_count}"
        )


def low_yield_warning(count: int, requested_count: int) -> str:
    """生成低产出警告文本"""
    return (
        f"⚠ 只生成了 {count}/{requested_count} 张卡片。\n\n"
        "获取更多卡片的建议:\n"
        f"• 尝试请求 {requested_count // 2} 张而不是 {requested_count} 张\n"
        '• 描述更具体，例如 "20 dutch dishes with english names"\n'
        "• 分多个小批次生成\n"
        "• 小模型不适合大批量请求，换用更大的模型效果更好\n\n"
        f"你仍然可以用这 {count} 张卡片创建牌组，或重新生成。"
    )


def shortfall_message(count: int, requested_count: int) -> str:
    """生成数量不足提示文本"""
    difference = requested_count - count
    return (
        f"生成了 {count} 张卡片，少于请求的 {requested_count} 张"
        f"（{difference} 张重复或无效卡片已被移除）。如有需要可以继续生成。"
    )


def success_message(requested_count: int) -> str:
    """生成成功提示文本"""
    return f"✓ 成功生成 {requested_count} 张卡片！"


class CardBatchBuilder:
    """
    卡片批次构建器

    把一次模型响应变成交给持久化层的批次结果。
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        on_event: Optional[DiagnosticHook] = None,
    ):
        """
        初始化构建器

        Args:
            config: 解析器配置
            on_event: 诊断回调
        """
        self.config = config or ParserConfig()
        self.parser = ResponseParser(self.config, on_event)

    def collect_candidates(self, raw_text: str) -> List[Card]:
        """
        收集候选卡片：严格解析无结果时退回宽松解析

        Args:
            raw_text: 模型响应文本

        Returns:
            未去重的候选卡片
        """
        candidates = self.parser.parse_candidates(raw_text)
        logger.debug(f"严格解析得到 {len(candidates)} 张候选卡片")

        if not candidates and self.config.lenient_fallback:
            logger.info("严格解析失败，尝试宽松解析...")
            candidates = self.parser.parse_lenient(raw_text)
            logger.info(f"宽松解析得到 {len(candidates)} 张候选卡片")

        return candidates

    def parse(self, raw_text: str) -> List[Card]:
        """
        解析并去重（不截断、不评估产出率）

        Args:
            raw_text: 模型响应文本

        Returns:
            卡片列表（可能为空）
        """
        candidates = self.collect_candidates(raw_text)
        return self.parser.card_deduplicator.deduplicate(candidates, self.parser.on_event)

    def build(self, raw_text: str, requested_count: int) -> GenerationResult:
        """
        构建批次结果

        Args:
            raw_text: 模型响应文本
            requested_count: 用户请求的卡片数量

        Returns:
            批次结果

        Raises:
            ValidationError: 请求数量无效
            InputTypeError: 响应不是字符串
        """
        validate_requested_count(requested_count, self.config.max_requested_cards)

        # 多出的卡片只取前 requested_count 张
        cards = self.parse(raw_text)[:requested_count]

        if not cards:
            logger.error("未能从响应中解析出任何卡片")
            logger.debug(f"响应前1000个字符: {raw_text[:1000]}")
            return GenerationResult(
                status=GenerationStatus.EMPTY,
                requested_count=requested_count,
                error=EMPTY_RESULT_ERROR,
                raw_text=raw_text.strip(),
                debug=raw_text[:DEBUG_SNIPPET_LENGTH],
            )

        count = len(cards)
        yield_ratio = count / requested_count

        if yield_ratio < self.config.low_yield_threshold:
            status = GenerationStatus.LOW_YIELD
            warning = low_yield_warning(count, requested_count)
            logger.warning(f"产出率过低: {count}/{requested_count} ({yield_ratio:.0%})")
        elif count == requested_count:
            status = GenerationStatus.SUCCESS
            warning = success_message(requested_count)
        else:
            status = GenerationStatus.SHORTFALL
            warning = shortfall_message(count, requested_count)

        logger.info(f"成功解析 {count}/{requested_count} 张卡片")
        return GenerationResult(
            status=status,
            cards=cards,
            count=count,
            requested_count=requested_count,
            yield_ratio=yield_ratio,
            warning=warning,
            raw_text=raw_text.strip(),
        )


def build_card_batch(
    raw_text: str,
    requested_count: int,
    config: Optional[ParserConfig] = None,
    on_event: Optional[DiagnosticHook] = None,
) -> GenerationResult:
    """
    构建批次结果的便捷函数

    Args:
        raw_text: 模型响应文本
        requested_count: 用户请求的卡片数量
        config: 解析器配置
        on_event: 诊断回调

    Returns:
        批次结果
    """
    return CardBatchBuilder(config, on_event).build(raw_text, requested_count)
