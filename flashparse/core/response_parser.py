"""
响应解析器模块

负责把模型的自由文本响应解析为规范化、去重后的卡片列表。

管道按固定顺序逐行执行：切行 -> 噪声清理 -> 行分类 -> 分隔符切分
-> 字段规范化 -> 元词过滤，最后对整个批次去重。后面的阶段从不影响前面的阶段。
"""

import re
from typing import List, Optional

from flashparse.core.card_deduplicator import CardDeduplicator
from flashparse.core.card_filter import LENIENT_META_WORDS, CardFilter
from flashparse.core.diagnostics import DiagnosticHook, ParseEvent, emit
from flashparse.core.line_classifier import LineClassifier, MatchKind, SkipRule
from flashparse.core.separator_splitter import SeparatorSplitter, split_at_first
from flashparse.core.text_normalizer import (
    clean_ai_generated_text,
    normalize_card_text,
    segment_lines,
)
from flashparse.exceptions import InputTypeError
from flashparse.models.card import CandidateLine, Card
from flashparse.models.config import ParserConfig

LENIENT_SEPARATORS = ("|", ":", "-", "=", "\t")
LENIENT_MIN_LINE_LENGTH = 5

_LEADING_NUMBER_RE = re.compile(r"^\d+[.)]\s+")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")


def _require_text(response: object) -> str:
    if not isinstance(response, str):
        raise InputTypeError(
            f"响应必须是字符串，实际类型为 {type(response).__name__}"
        )
    return response


class ResponseParser:
    """
    模型响应解析器

    对内容永不抛出异常：噪声和歧义只会让对应行不产生卡片。
    唯一的失败情况是输入不是字符串。
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        on_event: Optional[DiagnosticHook] = None,
    ):
        """
        初始化解析器

        Args:
            config: 解析器配置，为None时使用默认配置
            on_event: 诊断回调，为None时不产生任何副作用
        """
        self.config = config or ParserConfig()
        self.on_event = on_event

        extra_rules = [
            SkipRule(MatchKind(rule.kind), rule.phrase)
            for rule in self.config.extra_skip_rules
        ]
        self.line_classifier = LineClassifier(
            min_length=self.config.min_line_length,
            max_length=self.config.max_line_length,
            extra_rules=extra_rules,
        )
        self.separator_splitter = SeparatorSplitter()
        self.card_filter = CardFilter(extra_meta_words=self.config.extra_meta_words)
        self.card_deduplicator = CardDeduplicator(
            repetition_ceiling=self.config.repetition_ceiling,
            policy=self.config.repetition_policy,
        )

    def parse_response(self, response: str) -> List[Card]:
        """
        完整解析：严格逐行解析后对整个批次去重

        Args:
            response: 模型响应文本

        Returns:
            卡片列表（可能为空）
        """
        candidates = self.parse_candidates(response)
        return self.card_deduplicator.deduplicate(candidates, self.on_event)

    def parse_candidates(self, response: str) -> List[Card]:
        """
        严格逐行解析（不去重）

        Args:
            response: 模型响应文本

        Returns:
            按源文本顺序排列的候选卡片
        """
        response = _require_text(response)
        cards = []

        for number, raw in enumerate(segment_lines(response), 1):
            candidate = CandidateLine(number, raw, clean_ai_generated_text(raw))
            card = self._parse_line(candidate)
            if card is not None:
                cards.append(card)

        return cards

    def _parse_line(self, candidate: CandidateLine) -> Optional[Card]:
        if not self.line_classifier.accepts(
            candidate.cleaned, candidate.number, self.on_event
        ):
            return None

        split = self.separator_splitter.split(
            candidate.cleaned, candidate.number, self.on_event
        )
        if split is None:
            return None

        front = normalize_card_text(split.front)
        back = normalize_card_text(split.back)
        if not self.card_filter.accepts(front, back, candidate.number, self.on_event):
            return None

        card = Card(front=front, back=back)
        emit(
            self.on_event,
            ParseEvent("accept", "card", card.dedup_key, candidate.number, split.separator),
        )
        return card

    def parse_lenient(self, response: str) -> List[Card]:
        """
        宽松解析（不去重）

        严格解析一张都得不到时的后备方案：不做噪声清理和行分类，
        只去掉行首编号和括号注释，尝试更少的分隔符，并使用精简元词表。

        Args:
            response: 模型响应文本

        Returns:
            候选卡片列表
        """
        response = _require_text(response)
        cards = []

        for number, raw in enumerate(segment_lines(response), 1):
            line = raw.strip().lower()
            if len(line) < LENIENT_MIN_LINE_LENGTH:
                continue

            for separator in LENIENT_SEPARATORS:
                halves = split_at_first(line, separator)
                if halves is None:
                    continue
                front, back = halves
                front = _LEADING_NUMBER_RE.sub("", front)
                front = _PARENTHETICAL_RE.sub("", front).strip()
                back = _PARENTHETICAL_RE.sub("", back).strip()

                if (
                    front
                    and back
                    and front != back
                    and front not in LENIENT_META_WORDS
                    and back not in LENIENT_META_WORDS
                ):
                    card = Card(front=front, back=back)
                    emit(
                        self.on_event,
                        ParseEvent("fallback", "card", card.dedup_key, number, separator),
                    )
                    cards.append(card)
                    break

        return cards


def parse_and_normalize_flashcards(
    response: str,
    config: Optional[ParserConfig] = None,
    on_event: Optional[DiagnosticHook] = None,
) -> List[Card]:
    """
    严格逐行解析模型响应（不去重）

    Args:
        response: 模型响应文本
        config: 解析器配置
        on_event: 诊断回调

    Returns:
        候选卡片列表
    """
    return ResponseParser(config, on_event).parse_candidates(response)


def remove_duplicate_cards(
    cards: List[Card],
    config: Optional[ParserConfig] = None,
    on_event: Optional[DiagnosticHook] = None,
) -> List[Card]:
    """
    对卡片批次去重

    Args:
        cards: 卡片列表
        config: 解析器配置
        on_event: 诊断回调

    Returns:
        去重后的卡片列表
    """
    config = config or ParserConfig()
    deduplicator = CardDeduplicator(config.repetition_ceiling, config.repetition_policy)
    return deduplicator.deduplicate(cards, on_event)


def parse_flashcards(
    response: str,
    config: Optional[ParserConfig] = None,
    on_event: Optional[DiagnosticHook] = None,
) -> List[Card]:
    """
    完整解析管道：逐行解析并去重

    Args:
        response: 模型响应文本
        config: 解析器配置
        on_event: 诊断回调

    Returns:
        卡片列表（可能为空）
    """
    return ResponseParser(config, on_event).parse_response(response)
