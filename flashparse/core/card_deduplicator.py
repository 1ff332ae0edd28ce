"""
卡片去重器模块

负责去除重复卡片以及背面内容被过度重复的卡片。
"""

from collections import Counter
from typing import List, Optional, Sequence

from flashparse.core.diagnostics import DiagnosticHook, ParseEvent, emit
from flashparse.models.card import Card
from flashparse.models.config import REPETITION_CEILING, RepetitionPolicy


class CardDeduplicator:
    """
    卡片去重器类

    两遍处理整个批次：
    1. 统计每个（小写）背面内容在全部候选中出现的次数；
    2. 按原顺序遍历，跳过完全重复的卡片；背面全批次出现次数超过上限时，
       KEEP_FIRST 策略只保留最先出现的 repetition_ceiling 张，DROP_ALL 策略全部丢弃。

    这是基于计数而非相似度的过滤：宁可误删合理的重复答案，
    也要挡住模型对不同问题反复输出同一答案的失控情况。
    """

    def __init__(
        self,
        repetition_ceiling: int = REPETITION_CEILING,
        policy: RepetitionPolicy = RepetitionPolicy.KEEP_FIRST,
    ):
        """
        初始化去重器

        Args:
            repetition_ceiling: 同一背面内容允许保留的最大次数
            policy: 超限时的处理策略
        """
        self.repetition_ceiling = repetition_ceiling
        self.policy = RepetitionPolicy(policy)

    def deduplicate(
        self,
        cards: Sequence[Card],
        on_event: Optional[DiagnosticHook] = None,
    ) -> List[Card]:
        """
        去重卡片（保持原顺序，不修改卡片）

        Args:
            cards: 卡片列表
            on_event: 诊断回调

        Returns:
            去重后的卡片列表
        """
        # 第一遍：全批次背面计数
        back_counts = Counter(card.back.lower() for card in cards)

        # 第二遍：按原顺序过滤
        seen = set()
        kept_per_back: Counter = Counter()
        unique_cards = []

        for card in cards:
            key = card.dedup_key
            if key in seen:
                emit(on_event, ParseEvent("dedup", "duplicate", key))
                continue

            back_key = card.back.lower()
            back_count = back_counts[back_key]
            if back_count > self.repetition_ceiling and (
                self.policy == RepetitionPolicy.DROP_ALL
                or kept_per_back[back_key] >= self.repetition_ceiling
            ):
                emit(
                    on_event,
                    ParseEvent(
                        "dedup",
                        "repeated_back",
                        key,
                        detail=f"背面出现 {back_count} 次",
                    ),
                )
                continue

            seen.add(key)
            kept_per_back[back_key] += 1
            unique_cards.append(card)

        return unique_cards
