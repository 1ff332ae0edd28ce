"""
文本规范化测试
"""

import pytest

from flashparse.core.text_normalizer import (
    clean_ai_generated_text,
    normalize_card_text,
    segment_lines,
)


class TestNormalizeCardText:
    """字段规范化测试"""

    def test_empty_input(self):
        """测试空输入"""
        assert normalize_card_text("") == ""

    def test_lowercase_and_trim(self):
        """测试小写和去首尾空白"""
        assert normalize_card_text("HELLO") == "hello"
        assert normalize_card_text("  spaced  ") == "spaced"

    def test_keeps_numbering_inside_field(self):
        """测试字段内的编号不会被当作列表编号移除"""
        assert normalize_card_text("1. numbered") == "1. numbered"

    def test_strips_control_and_zero_width_chars(self):
        """测试去除控制字符和零宽字符"""
        assert normalize_card_text("ap\x00p\x1fle\x85") == "apple"
        assert normalize_card_text("\ufeffap\u200bple\u200d") == "apple"

    def test_strips_parenthetical(self):
        """测试去除括号注释"""
        assert normalize_card_text("appel (apple)") == "appel"
        assert normalize_card_text("de kat (the cat) slaapt") == "de kat slaapt"

    def test_strips_edge_quotes(self):
        """测试去除首尾引号（直引号和弯引号）"""
        assert normalize_card_text('"apple"') == "apple"
        assert normalize_card_text("'apple'") == "apple"
        assert normalize_card_text("“apple”") == "apple"

    def test_quote_exposed_by_parenthetical(self):
        """测试括号注释移除后暴露在末尾的引号也会被去除"""
        assert normalize_card_text('"appel" (apple)') == "appel"

    def test_keeps_apostrophe_inside_word(self):
        """测试单词内部的撇号保留"""
        assert normalize_card_text("s'il vous plaît") == "s'il vous plaît"

    def test_allowed_punctuation(self):
        """测试白名单内的标点保留，其余移除"""
        assert normalize_card_text("a+b=c @ 50% & €5!") == "a+b=c @ 50% & €5!"
        assert normalize_card_text("snow ☃ man ♥") == "snow man"
        assert normalize_card_text("[tag] <b>x</b>") == "tag bx/b"

    def test_unicode_letters_and_digits(self):
        """测试保留各语言字母和数字"""
        assert normalize_card_text("Ünïcödé") == "ünïcödé"
        assert normalize_card_text("日本語") == "日本語"
        assert normalize_card_text("Привет") == "привет"
        assert normalize_card_text("٣ apples") == "٣ apples"

    def test_collapses_whitespace(self):
        """测试折叠空白"""
        assert normalize_card_text("a \t\n  b c") == "a b c"

    @pytest.mark.parametrize(
        "text",
        [
            "HELLO",
            ' "appel" (apple)',
            "♥\"quoted",
            "a (b) (c",
            "((nested)) value",
            "\u200b'  x  '\u200b",
            "“curly” and 'straight'",
            "ǅemal İstanbul",
            "tab\tseparated\x7fvalue",
            "",
            "   ",
            "!!!",
        ],
    )
    def test_idempotent(self, text):
        """测试规范化幂等"""
        once = normalize_card_text(text)
        assert normalize_card_text(once) == once


class TestCleanAIGeneratedText:
    """噪声清理测试"""

    def test_empty_input(self):
        """测试空输入"""
        assert clean_ai_generated_text("") == ""

    def test_strips_markdown(self):
        """测试去除 markdown 标记"""
        assert clean_ai_generated_text("**apple** | appel") == "apple | appel"
        assert clean_ai_generated_text("_bread_ | brood") == "bread | brood"
        assert clean_ai_generated_text("~~cheese~~ | `kaas`") == "cheese | kaas"
        assert clean_ai_generated_text("## Dutch words") == "Dutch words"

    def test_strips_bullets(self):
        """测试去除列表符号"""
        assert clean_ai_generated_text("- apple | appel") == "apple | appel"
        assert clean_ai_generated_text("  • apple | appel") == "apple | appel"
        assert clean_ai_generated_text("◦apple | appel") == "apple | appel"

    def test_strips_enumeration(self):
        """测试去除编号"""
        assert clean_ai_generated_text("1. apple | appel") == "apple | appel"
        assert clean_ai_generated_text("12) apple | appel") == "apple | appel"
        assert clean_ai_generated_text("a. apple | appel") == "apple | appel"
        assert clean_ai_generated_text("b) apple | appel") == "apple | appel"

    def test_enumeration_only_at_line_start(self):
        """测试只去除行首编号"""
        assert clean_ai_generated_text("chapter 1. intro | hoofdstuk") == "chapter 1. intro | hoofdstuk"

    def test_strips_edge_quotes_and_whitespace(self):
        """测试去除首尾引号并折叠空白"""
        assert clean_ai_generated_text('"apple   |   appel"') == "apple | appel"
        assert clean_ai_generated_text("  apple   |   appel  \r") == "apple | appel"

    def test_numbered_and_plain_lines_match(self):
        """测试带编号和不带编号的行清理结果相同"""
        assert clean_ai_generated_text("1. apple | appel") == clean_ai_generated_text(
            "apple | appel"
        )

    @pytest.mark.parametrize(
        "line",
        ["3.14 | pi", "i.e. that is | dat wil zeggen", "-5 | min vijf", "e.g. | bijv."],
    )
    def test_keeps_decimals_and_abbreviations(self, line):
        """测试小数、缩写和负数不被当作编号"""
        assert clean_ai_generated_text(line) == line

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("- - minus | min", "minus | min"),
            ("1. 3.14 | pi", "3.14 | pi"),
            ("1. - a. apple | appel", "apple | appel"),
            ('"1. apple | appel"', "apple | appel"),
            ("A. apple | appel", "apple | appel"),
        ],
    )
    def test_strips_stacked_markers(self, line, expected):
        """测试连续的列表标记全部去除"""
        assert clean_ai_generated_text(line) == expected

    @pytest.mark.parametrize(
        "line",
        ["- - minus | min", '"1. apple | appel"', "**2.** 2.5 | x", "  • ◦ x | y"],
    )
    def test_idempotent(self, line):
        """测试清理幂等"""
        once = clean_ai_generated_text(line)
        assert clean_ai_generated_text(once) == once


class TestSegmentLines:
    """切行测试"""

    def test_split_on_newline(self):
        """测试按换行切分"""
        assert segment_lines("a\nb\n\nc") == ["a", "b", "", "c"]

    def test_empty(self):
        """测试空文本"""
        assert segment_lines("") == []

    def test_carriage_returns_are_left_for_cleaning(self):
        """测试回车符留给清理阶段处理"""
        lines = segment_lines("a | b\r\nc | d")
        assert lines == ["a | b\r", "c | d"]
        assert clean_ai_generated_text(lines[0]) == "a | b"
