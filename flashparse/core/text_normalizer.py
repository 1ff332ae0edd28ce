"""
文本规范化模块

包含解析管道的两个基础工具：
- clean_ai_generated_text: 清理单行中的模型格式残留（markdown、列表符号、编号、引号）
- normalize_card_text: 规范化卡片的单个字段（小写、去控制字符、去括号注释、字符白名单）

两个函数对任何字符串输入都不会失败。
"""

import re
import unicodedata
from typing import List

# 直引号与弯引号
QUOTE_CHARS = "\"'“”‘’„‚"
# 字段中允许保留的标点
ALLOWED_PUNCTUATION = frozenset(".,!?;:()-'\"/&%$€£¥+*=@#")

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_ZERO_WIDTH_RE = re.compile(r"[\u200b-\u200d\ufeff]")
_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
_EDGE_QUOTES_RE = re.compile(f"^[{QUOTE_CHARS}]+|[{QUOTE_CHARS}]+$")
_WHITESPACE_RE = re.compile(r"\s+")

_MARKDOWN_RE = re.compile(r"[*_~`#]")
# 行首列表标记：圆点符号、"- "、"1. " / "2) "、"a. " / "B) "，可连续出现。
# 连字符、数字和字母标记后必须跟空白，"3.14"、"i.e."、"-5" 这类内容不受影响
_LIST_MARKER_RE = re.compile(
    r"^\s*(?:(?:[•●▪▫◦⦿⦾]\s*|-\s+|\d+[.)]\s+|[a-zA-Z][.)]\s+))+"
)


def segment_lines(text: str) -> List[str]:
    """
    将原始响应切分为候选行

    只按换行符切分，残留的回车符会在后续的空白折叠中被清除。

    Args:
        text: 原始响应文本

    Returns:
        行列表
    """
    if not text:
        return []
    return text.split("\n")


def _is_allowed_char(ch: str) -> bool:
    if ch.isspace() or ch in ALLOWED_PUNCTUATION:
        return True
    # L* 为各语言字母，N* 为各类数字
    return unicodedata.category(ch)[0] in ("L", "N")


def normalize_card_text(text: str) -> str:
    """
    规范化卡片字段

    步骤顺序有意义：括号注释必须在去引号和折叠空白之前移除，
    因为前面的步骤可能在首尾留下新的引号或空白。

    Args:
        text: 原始字段文本（可以为空）

    Returns:
        规范化后的文本
    """
    if not text:
        return ""

    text = text.lower()
    text = _CONTROL_RE.sub("", text)
    text = _ZERO_WIDTH_RE.sub("", text)
    # 去除 "(apple)" 之类的括号翻译或注释
    text = _PARENTHETICAL_RE.sub("", text)
    text = _EDGE_QUOTES_RE.sub("", text)
    text = "".join(ch for ch in text if _is_allowed_char(ch))
    text = _WHITESPACE_RE.sub(" ", text)
    # 字符过滤可能把引号暴露到首尾，一并去掉以保证幂等
    return text.strip(" " + QUOTE_CHARS)


def clean_ai_generated_text(text: str) -> str:
    """
    清理模型生成文本中的格式残留

    编号和列表符号锚定在行首，因此只能对单行调用。

    Args:
        text: 单行文本

    Returns:
        清理后的文本
    """
    if not text:
        return ""

    text = _MARKDOWN_RE.sub("", text)
    # 引号里也可能包着编号，处理到不再变化为止
    previous = None
    while text != previous:
        previous = text
        text = _LIST_MARKER_RE.sub("", text)
        text = _EDGE_QUOTES_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()
