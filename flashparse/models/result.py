"""
生成结果模型

调用方拿到的批次结果：卡片列表、产出率以及面向用户的提示信息。
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from flashparse.models.card import Card


class GenerationStatus(str, Enum):
    """结果状态枚举"""

    SUCCESS = "success"
    SHORTFALL = "shortfall"
    LOW_YIELD = "low_yield"
    EMPTY = "empty"


class GenerationResult(BaseModel):
    """
    批次结果模型

    低产出（LOW_YIELD）只是软警告，卡片照常返回；只有 EMPTY 表示没有可用卡片。

    Attributes:
        status: 结果状态
        cards: 去重并截断后的卡片列表
        count: 卡片数量
        requested_count: 请求的卡片数量
        yield_ratio: 产出率（count / requested_count）
        warning: 提示信息（成功、不足或低产出）
        error: 错误信息（仅 EMPTY 状态）
        raw_text: 去除首尾空白的原始响应
        debug: 原始响应的前500个字符（仅 EMPTY 状态）
    """

    model_config = ConfigDict(use_enum_values=True)

    status: GenerationStatus = Field(..., description="结果状态")
    cards: List[Card] = Field(default_factory=list, description="卡片列表")
    count: int = Field(default=0, ge=0, description="卡片数量")
    requested_count: int = Field(..., ge=1, description="请求的卡片数量")
    yield_ratio: float = Field(default=0.0, ge=0.0, description="产出率")
    warning: Optional[str] = Field(default=None, description="提示信息")
    error: Optional[str] = Field(default=None, description="错误信息")
    raw_text: str = Field(default="", description="原始响应")
    debug: Optional[str] = Field(default=None, description="调试片段")

    @property
    def is_success(self) -> bool:
        """除 EMPTY 外均视为成功（部分结果也会返回给用户）"""
        return self.status != GenerationStatus.EMPTY

    def to_records(self) -> List[Dict[str, Any]]:
        """
        转换为记录列表

        Returns:
            每张卡片的 {front, back} 字典列表
        """
        return [card.to_record() for card in self.cards]
