"""
卡片数据模型

定义解析管道中流转的数据结构：候选行、切分结果和规范化后的卡片。
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass(frozen=True)
class CandidateLine:
    """
    候选行

    原始响应中的一行及其清洗后的文本，分类后即被丢弃。

    Attributes:
        number: 行号（从1开始）
        raw: 原始行文本
        cleaned: 经过噪声清理后的文本
    """

    number: int
    raw: str
    cleaned: str


class SplitResult(NamedTuple):
    """分隔符切分结果（正面原文, 背面原文, 命中的分隔符）"""

    front: str
    back: str
    separator: str


class Card(BaseModel):
    """
    规范化卡片模型

    两面均已经过字段规范化。创建后不可修改。

    Attributes:
        front: 卡片正面内容（提示面）
        back: 卡片背面内容（答案面）
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "front": "apple",
                "back": "appel",
            }
        },
    )

    front: str = Field(..., min_length=1, description="卡片正面内容")
    back: str = Field(..., min_length=1, description="卡片背面内容")

    @model_validator(mode="after")
    def check_sides_differ(self) -> "Card":
        """
        验证两面内容不同（忽略大小写）

        Returns:
            验证后的卡片

        Raises:
            ValueError: 两面内容为空白或相同
        """
        if not self.front.strip() or not self.back.strip():
            raise ValueError("卡片两面都不能为空")
        if self.front.lower() == self.back.lower():
            raise ValueError(f"卡片两面内容相同: {self.front}")
        return self

    @property
    def dedup_key(self) -> str:
        """去重键：小写正面|小写背面"""
        return f"{self.front.lower()}|{self.back.lower()}"

    def to_record(self) -> Dict[str, str]:
        """
        转换为交给持久化层的记录

        Returns:
            包含 front 和 back 的字典
        """
        return {"front": self.front, "back": self.back}
