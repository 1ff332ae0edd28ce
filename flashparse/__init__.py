"""
闪卡解析系统

把生成式模型输出的自由文本整理为规范化、去重后的正反面卡片。
"""

from flashparse.core.card_builder import CardBatchBuilder, build_card_batch
from flashparse.core.response_parser import (
    ResponseParser,
    parse_and_normalize_flashcards,
    parse_flashcards,
    remove_duplicate_cards,
)
from flashparse.core.text_normalizer import clean_ai_generated_text, normalize_card_text
from flashparse.exceptions import (
    ConfigurationError,
    FlashParseError,
    InputTypeError,
    TemplateError,
    ValidationError,
)
from flashparse.models.card import Card

__version__ = "0.1.0"
__author__ = "FlashParse Team"

__all__ = [
    "Card",
    "CardBatchBuilder",
    "ConfigurationError",
    "FlashParseError",
    "InputTypeError",
    "ResponseParser",
    "TemplateError",
    "ValidationError",
    "build_card_batch",
    "clean_ai_generated_text",
    "normalize_card_text",
    "parse_and_normalize_flashcards",
    "parse_flashcards",
    "remove_duplicate_cards",
]
