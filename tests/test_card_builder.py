"""
卡片批次构建测试
"""

import pytest

from flashparse.core.card_builder import (
    DEBUG_SNIPPET_LENGTH,
    EMPTY_RESULT_ERROR,
    CardBatchBuilder,
    build_card_batch,
    low_yield_warning,
    shortfall_message,
    success_message,
    validate_requested_count,
)
from flashparse.core.stats import ParseStats
from flashparse.exceptions import InputTypeError, ValidationError
from flashparse.models.config import ParserConfig
from flashparse.models.result import GenerationStatus


def _response(count: int) -> str:
    return "\n".join(f"word{i} | woord{i}" for i in range(count))


class TestValidateRequestedCount:
    """请求数量验证测试"""

    @pytest.mark.parametrize("count", [1, 50, 100])
    def test_valid(self, count):
        """测试有效数量"""
        validate_requested_count(count, 100)

    @pytest.mark.parametrize("count", [0, -1, 101, True, 2.5, "10"])
    def test_invalid(self, count):
        """测试无效数量"""
        with pytest.raises(ValidationError):
            validate_requested_count(count, 100)


class TestMessages:
    """提示信息测试"""

    def test_low_yield_warning(self):
        """测试低产出警告包含数量和减半建议"""
        message = low_yield_warning(3, 20)
        assert "3/20" in message
        assert "10" in message

    def test_shortfall_message(self):
        """测试数量不足提示包含差值"""
        assert "2 张" in shortfall_message(8, 10)

    def test_success_message(self):
        """测试成功提示"""
        assert "10" in success_message(10)


class TestCardBatchBuilder:
    """批次构建器测试"""

    def test_success(self, basic_response):
        """测试数量刚好满足"""
        result = CardBatchBuilder().build(basic_response, 3)

        assert result.status == GenerationStatus.SUCCESS
        assert result.count == 3
        assert result.yield_ratio == 1.0
        assert result.warning == success_message(3)
        assert result.error is None
        assert result.is_success

    def test_truncates_to_requested(self, basic_response):
        """测试多出的卡片被截断"""
        result = CardBatchBuilder().build(basic_response, 2)

        assert result.status == GenerationStatus.SUCCESS
        assert [card.front for card in result.cards] == ["apple", "bread"]

    def test_shortfall(self, basic_response):
        """测试数量不足但产出率达标"""
        result = CardBatchBuilder().build(basic_response, 5)

        assert result.status == GenerationStatus.SHORTFALL
        assert result.count == 3
        assert result.warning == shortfall_message(3, 5)

    def test_low_yield_still_returns_cards(self, basic_response):
        """测试低产出只是警告，卡片照常返回"""
        result = CardBatchBuilder().build(basic_response, 10)

        assert result.status == GenerationStatus.LOW_YIELD
        assert result.count == 3
        assert result.yield_ratio == pytest.approx(0.3)
        assert result.warning == low_yield_warning(3, 10)
        assert result.is_success

    def test_threshold_boundary(self):
        """测试产出率正好等于阈值时不算低产出"""
        result = CardBatchBuilder().build(_response(4), 10)
        assert result.status == GenerationStatus.SHORTFALL

    def test_custom_threshold(self):
        """测试自定义低产出阈值"""
        config = ParserConfig(low_yield_threshold=0.5)
        result = CardBatchBuilder(config).build(_response(4), 10)
        assert result.status == GenerationStatus.LOW_YIELD

    def test_empty(self):
        """测试没有卡片时返回 EMPTY 和调试信息"""
        raw_text = "Here are your flashcards!\n" + "x" * 1000
        result = CardBatchBuilder().build(raw_text, 5)

        assert result.status == GenerationStatus.EMPTY
        assert result.cards == []
        assert result.count == 0
        assert result.error == EMPTY_RESULT_ERROR
        assert len(result.debug) == DEBUG_SNIPPET_LENGTH
        assert not result.is_success

    def test_raw_text_stripped(self, basic_response):
        """测试保留去除首尾空白的原始响应"""
        result = CardBatchBuilder().build(f"\n  {basic_response}  \n", 3)
        assert result.raw_text == basic_response

    def test_lenient_fallback(self):
        """测试严格解析无结果时启用宽松解析"""
        response = "term | begrip\nvocabulary word | woordenschat"
        stats = ParseStats()
        result = CardBatchBuilder(on_event=stats).build(response, 2)

        assert result.status == GenerationStatus.SUCCESS
        assert result.to_records() == [
            {"front": "term", "back": "begrip"},
            {"front": "vocabulary word", "back": "woordenschat"},
        ]
        assert stats.fallback_accepted == 2

    def test_lenient_fallback_disabled(self):
        """测试禁用宽松解析"""
        config = ParserConfig(lenient_fallback=False)
        result = CardBatchBuilder(config).build("term | begrip", 1)
        assert result.status == GenerationStatus.EMPTY

    def test_lenient_not_used_when_strict_succeeds(self, basic_response):
        """测试严格解析有结果时不启用宽松解析"""
        stats = ParseStats()
        CardBatchBuilder(on_event=stats).build(basic_response + "\nterm | begrip", 3)
        assert stats.fallback_accepted == 0

    def test_parse_without_truncation(self, noisy_response):
        """测试 parse 只解析去重，不截断"""
        cards = CardBatchBuilder().parse(noisy_response)
        assert len(cards) == 4

    def test_invalid_requested_count(self, basic_response):
        """测试无效请求数量"""
        with pytest.raises(ValidationError):
            CardBatchBuilder().build(basic_response, 0)

        config = ParserConfig(max_requested_cards=10)
        with pytest.raises(ValidationError):
            CardBatchBuilder(config).build(basic_response, 11)

    def test_non_string_input(self):
        """测试非字符串响应"""
        with pytest.raises(InputTypeError):
            CardBatchBuilder().build(None, 5)

    def test_serialization(self, basic_response):
        """测试结果序列化"""
        data = build_card_batch(basic_response, 3).model_dump(mode="json")

        assert data["status"] == "success"
        assert data["cards"][0] == {"front": "apple", "back": "appel"}
        assert data["requested_count"] == 3

    def test_drop_all_can_empty_batch(self):
        """测试 DROP_ALL 去重后没有卡片时返回 EMPTY"""
        config = ParserConfig(repetition_policy="drop_all")
        result = CardBatchBuilder(config).build("a1 | x\na2 | x\na3 | x", 3)

        assert result.status == GenerationStatus.EMPTY
        assert result.error == EMPTY_RESULT_ERROR

    def test_tab_separated_response_uses_fallback(self):
        """测试制表符分隔的响应通过宽松解析得到卡片"""
        stats = ParseStats()
        cards = CardBatchBuilder(on_event=stats).parse("hond\tdog\nkat\tcat")

        assert [(card.front, card.back) for card in cards] == [("hond", "dog"), ("kat", "cat")]
        assert stats.lines_unsplit == 2
        assert stats.fallback_accepted == 2
