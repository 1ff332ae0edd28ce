"""
卡片过滤器模块

负责拒绝把表头标签当作内容的卡片（元词过滤）。
"""

from typing import FrozenSet, Iterable, Optional

from flashparse.core.diagnostics import DiagnosticHook, ParseEvent, emit

# 结构标签以及用作列标题的语言名，它们永远不应成为卡片内容
DEFAULT_META_WORDS: FrozenSet[str] = frozenset(
    {
        "woorden",
        "woord",
        "tekst",
        "text",
        "word",
        "words",
        "translation",
        "vertaling",
        "vertalingen",
        "english",
        "dutch",
        "term",
        "definition",
        "front",
        "back",
        "leftside",
        "rightside",
        "example",
        "format",
        "native",
        "language",
        "taal",
    }
)

# 宽松解析使用的精简元词表
LENIENT_META_WORDS: FrozenSet[str] = frozenset(
    {
        "woorden",
        "woord",
        "tekst",
        "text",
        "word",
        "words",
        "translation",
        "vertaling",
        "vertalingen",
    }
)


class CardFilter:
    """
    卡片过滤器类

    分隔符切分无法区分真正的简短答案和表头标签，这里做最后的语义把关：
    任一面整体等于元词（忽略大小写，非子串匹配）即拒绝。
    """

    def __init__(
        self,
        meta_words: Iterable[str] = DEFAULT_META_WORDS,
        extra_meta_words: Iterable[str] = (),
    ):
        """
        初始化过滤器

        Args:
            meta_words: 基础元词表
            extra_meta_words: 追加的元词
        """
        self.meta_words = frozenset(
            word.lower() for word in (*meta_words, *extra_meta_words)
        )

    def is_meta_word(self, text: str) -> bool:
        """
        判断文本是否整体为元词

        Args:
            text: 卡片一面的内容

        Returns:
            是元词时返回True
        """
        return text.strip().lower() in self.meta_words

    def accepts(
        self,
        front: str,
        back: str,
        line_number: Optional[int] = None,
        on_event: Optional[DiagnosticHook] = None,
    ) -> bool:
        """
        验证一对规范化后的内容

        Args:
            front: 正面内容
            back: 背面内容
            line_number: 源行号（用于诊断事件）
            on_event: 诊断回调

        Returns:
            两面均非空、互不相同且都不是元词时返回True
        """
        if not front or not back:
            emit(on_event, ParseEvent("meta", "empty_side", f"{front}|{back}", line_number))
            return False

        if front.lower() == back.lower():
            emit(on_event, ParseEvent("meta", "same_sides", front, line_number))
            return False

        for side in (front, back):
            if self.is_meta_word(side):
                emit(
                    on_event,
                    ParseEvent("meta", "meta_word", f"{front}|{back}", line_number, side),
                )
                return False

        return True
