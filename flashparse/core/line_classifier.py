"""
行分类器模块

判断清洗后的行是否可能是一张卡片。模型经常把指令、开场白和表头原样吐回来，
跳过规则表是防止这些内容被当成卡片的主要手段。

规则表是显式配置而不是条件分支，新的噪声模式只需追加一条 SkipRule。
"""

import re
from enum import Enum
from typing import Iterable, NamedTuple, Optional, Tuple

from flashparse.core.diagnostics import DiagnosticHook, ParseEvent, emit
from flashparse.models.config import MAX_LINE_LENGTH, MIN_LINE_LENGTH

_NUMERIC_LINE_RE = re.compile(r"^[\d\s,]+$")


class MatchKind(str, Enum):
    """跳过规则的匹配方式"""

    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"


class SkipRule(NamedTuple):
    """跳过规则：匹配方式 + 小写短语"""

    kind: MatchKind
    phrase: str

    def matches(self, lower_line: str) -> bool:
        """判断小写行是否命中本规则"""
        if self.kind == MatchKind.EXACT:
            return lower_line == self.phrase
        if self.kind == MatchKind.PREFIX:
            return lower_line.startswith(self.phrase)
        return self.phrase in lower_line


def _rules(kind: MatchKind, *phrases: str) -> Tuple[SkipRule, ...]:
    return tuple(SkipRule(kind, phrase) for phrase in phrases)


DEFAULT_SKIP_RULES: Tuple[SkipRule, ...] = (
    # 开场白
    *_rules(MatchKind.SUBSTRING, "here are", "here is"),
    *_rules(MatchKind.PREFIX, "okay", "sure", "certainly", "of course", "generated"),
    # 结构/元信息行
    *_rules(MatchKind.EXACT, "cards", "cards:", "output", "topic:"),
    *_rules(
        MatchKind.PREFIX,
        "term |",
        "translation |",
        "explanation |",
        "front |",
        "back |",
        "leftside |",
        "rightside |",
        "no numbering",
        "name:",
        "description:",
        "rules:",
    ),
    *_rules(
        MatchKind.SUBSTRING,
        "flashcard",
        "vocabulary",
        "each with",
        "different dutch",
        "different english",
        "format:",
        "examples:",
        "perfect examples",
    ),
    # 被回显的指令
    *_rules(MatchKind.SUBSTRING, "must create", "copy this", "each line", "unique cards"),
)


class LineClassifier:
    """
    行分类器类

    按顺序检查：空行、过短、过长、纯数字、跳过规则。任一命中即拒绝。
    """

    def __init__(
        self,
        min_length: int = MIN_LINE_LENGTH,
        max_length: int = MAX_LINE_LENGTH,
        extra_rules: Iterable[SkipRule] = (),
    ):
        """
        初始化行分类器

        Args:
            min_length: 最小行长度
            max_length: 最大行长度，更长的行视为说明文字
            extra_rules: 追加在默认规则表之后的跳过规则
        """
        self.min_length = min_length
        self.max_length = max_length
        self.skip_rules = DEFAULT_SKIP_RULES + tuple(extra_rules)

    def rejection_reason(self, line: str) -> Optional[str]:
        """
        获取拒绝原因

        Args:
            line: 清洗后的行

        Returns:
            拒绝原因标记，接受时返回None
        """
        if not line:
            return "empty"
        if len(line) < self.min_length:
            return "too_short"
        if len(line) > self.max_length:
            return "too_long"
        if _NUMERIC_LINE_RE.match(line):
            return "numeric"

        lower_line = line.lower()
        for rule in self.skip_rules:
            if rule.matches(lower_line):
                return "skip_phrase"
        return None

    def accepts(
        self,
        line: str,
        line_number: Optional[int] = None,
        on_event: Optional[DiagnosticHook] = None,
    ) -> bool:
        """
        判断行是否可能是卡片

        Args:
            line: 清洗后的行
            line_number: 源行号（用于诊断事件）
            on_event: 诊断回调

        Returns:
            接受时返回True
        """
        reason = self.rejection_reason(line)
        if reason is None:
            return True
        emit(on_event, ParseEvent("classify", reason, line, line_number))
        return False
