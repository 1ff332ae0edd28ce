"""
配置数据模型

定义解析器配置和应用配置的数据结构。
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

# 同一背面内容在一个批次中最多保留的次数（防止模型对不同问题重复同一答案）
REPETITION_CEILING = 2
# 产出率低于该阈值时给出警告，但仍返回卡片
LOW_YIELD_THRESHOLD = 0.4
# 向模型请求的卡片数量相对用户需求的倍数（为过滤和去重留余量）
OVERGENERATION_FACTOR = 2.0
MIN_LINE_LENGTH = 3
MAX_LINE_LENGTH = 100
MAX_REQUESTED_CARDS = 100


class RepetitionPolicy(str, Enum):
    """背面重复超限时的处理策略"""

    # 按原顺序保留最先出现的 repetition_ceiling 张
    KEEP_FIRST = "keep_first"
    # 全批次出现次数超限即全部丢弃
    DROP_ALL = "drop_all"


class SkipRuleConfig(BaseModel):
    """额外跳过规则配置"""

    kind: str = Field(..., description="匹配方式 (exact/prefix/substring)")
    phrase: str = Field(..., min_length=1, description="匹配短语（小写比较）")

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        """
        验证匹配方式

        Args:
            v: 匹配方式字符串

        Returns:
            验证后的匹配方式
        """
        valid_kinds = ["exact", "prefix", "substring"]
        if v.lower() not in valid_kinds:
            raise ValueError(f"kind必须是以下之一: {valid_kinds}")
        return v.lower()

    @field_validator("phrase")
    @classmethod
    def lower_phrase(cls, v: str) -> str:
        """短语统一转为小写"""
        return v.lower()


class ParserConfig(BaseModel):
    """
    解析器配置模型

    包含行长度门限、重复上限、产出率阈值以及可扩展的跳过规则和元词表。
    """

    min_line_length: int = Field(
        default=MIN_LINE_LENGTH, ge=1, description="有效行的最小长度"
    )
    max_line_length: int = Field(
        default=MAX_LINE_LENGTH, ge=1, description="有效行的最大长度（更长视为说明文字）"
    )
    repetition_ceiling: int = Field(
        default=REPETITION_CEILING, ge=1, description="同一背面内容的最大保留次数"
    )
    repetition_policy: RepetitionPolicy = Field(
        default=RepetitionPolicy.KEEP_FIRST, description="背面重复超限时的处理策略"
    )
    low_yield_threshold: float = Field(
        default=LOW_YIELD_THRESHOLD, ge=0.0, le=1.0, description="低产出警告阈值"
    )
    overgeneration_factor: float = Field(
        default=OVERGENERATION_FACTOR, ge=1.0, description="请求数量放大倍数"
    )
    max_requested_cards: int = Field(
        default=MAX_REQUESTED_CARDS, ge=1, description="单次最多请求的卡片数量"
    )
    lenient_fallback: bool = Field(
        default=True, description="严格解析无结果时是否启用宽松解析"
    )
    extra_skip_rules: List[SkipRuleConfig] = Field(
        default_factory=list, description="额外的跳过规则"
    )
    extra_meta_words: List[str] = Field(
        default_factory=list, description="额外的元词"
    )

    @field_validator("extra_meta_words")
    @classmethod
    def lower_meta_words(cls, v: List[str]) -> List[str]:
        """元词统一转为小写并去除空白项"""
        return [word.strip().lower() for word in v if word and word.strip()]

    @model_validator(mode="after")
    def check_line_bounds(self) -> "ParserConfig":
        """验证行长度上下限"""
        if self.min_line_length > self.max_line_length:
            raise ValueError(
                f"min_line_length ({self.min_line_length}) 不能大于 "
                f"max_line_length ({self.max_line_length})"
            )
        return self


class AppConfig(BaseModel):
    """
    应用主配置模型
    """

    parser: ParserConfig = Field(default_factory=ParserConfig, description="解析器配置")

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """
        从字典创建配置对象

        Args:
            data: 配置字典

        Returns:
            配置对象
        """
        parser_config = ParserConfig(**(data.get("parser") or {}))
        return cls(parser=parser_config)

    def merge(self, other: "AppConfig") -> "AppConfig":
        """
        合并另一个配置对象

        使用other中的非默认值覆盖当前配置。

        Args:
            other: 要合并的配置对象

        Returns:
            合并后的新配置对象
        """
        merged = self.model_copy(deep=True)

        # 直接取属性而非 dump 后的值，保留 SkipRuleConfig 等嵌套模型
        for key in other.parser.model_dump(exclude_defaults=True):
            setattr(merged.parser, key, getattr(other.parser, key))

        return merged
