"""
分隔符切分模块

用有序的分隔符表把一行切成正反两面。管道符最可靠，最先尝试；
裸连字符、等号这类容易出现在正文里的分隔符放在最后。
"""

from typing import Callable, Iterable, NamedTuple, Optional, Tuple

from flashparse.core.diagnostics import DiagnosticHook, ParseEvent, emit
from flashparse.models.card import SplitResult

SplitStrategy = Callable[[str, str], Optional[Tuple[str, str]]]


def split_at_first(line: str, delimiter: str) -> Optional[Tuple[str, str]]:
    """
    在分隔符第一次出现处切分

    用第一次而不是最后一次出现，背面释义里的分隔符不会影响切分点。

    Args:
        line: 待切分的行
        delimiter: 分隔符

    Returns:
        去除首尾空白后的 (正面, 背面)，分隔符不存在时返回None
    """
    index = line.find(delimiter)
    if index == -1:
        return None
    return line[:index].strip(), line[index + len(delimiter):].strip()


class SeparatorRule(NamedTuple):
    """分隔符规则：分隔符 + 切分策略"""

    delimiter: str
    strategy: SplitStrategy = split_at_first


DEFAULT_SEPARATORS: Tuple[SeparatorRule, ...] = (
    SeparatorRule("|"),
    SeparatorRule(" | "),
    SeparatorRule(":"),
    SeparatorRule(" - "),
    SeparatorRule("-"),
    # 噪声清理会把制表符折叠成空格，这条规则只对直接调用切分器的代码生效
    SeparatorRule("\t"),
    SeparatorRule("="),
    SeparatorRule(" / "),
)


class SeparatorSplitter:
    """
    分隔符切分器类

    按优先级依次尝试分隔符，第一个产生两段非空且不同内容的规则胜出。
    """

    def __init__(self, separators: Iterable[SeparatorRule] = DEFAULT_SEPARATORS):
        """
        初始化切分器

        Args:
            separators: 按优先级排列的分隔符规则
        """
        self.separators = tuple(separators)

    def split(
        self,
        line: str,
        line_number: Optional[int] = None,
        on_event: Optional[DiagnosticHook] = None,
    ) -> Optional[SplitResult]:
        """
        切分一行

        Args:
            line: 已通过分类的行
            line_number: 源行号（用于诊断事件）
            on_event: 诊断回调

        Returns:
            切分结果，没有任何分隔符满足条件时返回None
        """
        for rule in self.separators:
            if rule.delimiter not in line:
                continue
            halves = rule.strategy(line, rule.delimiter)
            if halves is None:
                continue
            front, back = halves
            if front and back and front != back:
                return SplitResult(front, back, rule.delimiter)

        emit(on_event, ParseEvent("split", "no_separator", line, line_number))
        return None
