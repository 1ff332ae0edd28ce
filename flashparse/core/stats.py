"""
解析统计信息模块

定义解析过程中的统计数据结构。ParseStats 本身就是一个诊断回调，
传给解析器即可边解析边计数。
"""

from collections import Counter
from dataclasses import dataclass, field

from loguru import logger

from flashparse.core.diagnostics import ParseEvent


@dataclass
class ParseStats:
    """解析统计信息

    Attributes:
        lines_skipped: 被行分类器拒绝的行数（按原因）
        lines_unsplit: 找不到分隔符的行数
        meta_rejected: 被元词过滤拒绝的行数
        accepted: 严格解析接受的候选数
        fallback_accepted: 宽松解析接受的候选数
        duplicates_removed: 去重阶段移除的完全重复卡片数
        repetitions_removed: 去重阶段因背面重复超限移除的卡片数
    """

    lines_skipped: Counter = field(default_factory=Counter)
    lines_unsplit: int = 0
    meta_rejected: int = 0
    accepted: int = 0
    fallback_accepted: int = 0
    duplicates_removed: int = 0
    repetitions_removed: int = 0

    def __call__(self, event: ParseEvent) -> None:
        if event.stage == "classify":
            self.lines_skipped[event.reason] += 1
        elif event.stage == "split":
            self.lines_unsplit += 1
        elif event.stage == "meta":
            self.meta_rejected += 1
        elif event.stage == "accept":
            self.accepted += 1
        elif event.stage == "fallback":
            self.fallback_accepted += 1
        elif event.stage == "dedup":
            if event.reason == "duplicate":
                self.duplicates_removed += 1
            else:
                self.repetitions_removed += 1

    @property
    def lines_rejected(self) -> int:
        """被拒绝的非空行总数（分类、切分、元词三个阶段）"""
        skipped = sum(self.lines_skipped.values()) - self.lines_skipped["empty"]
        return skipped + self.lines_unsplit + self.meta_rejected

    @property
    def candidates(self) -> int:
        """进入去重阶段的候选总数"""
        return self.accepted + self.fallback_accepted

    @property
    def kept(self) -> int:
        """去重后保留的卡片数"""
        return self.candidates - self.duplicates_removed - self.repetitions_removed

    @property
    def acceptance_rate(self) -> float:
        """候选行中最终保留的比例"""
        total = self.lines_rejected + self.candidates
        if total == 0:
            return 0.0
        return self.kept / total

    def log_summary(self) -> None:
        """输出统计摘要"""
        logger.info("=" * 60)
        logger.info("解析统计信息:")
        logger.info(f"  跳过行数: {sum(self.lines_skipped.values())}")
        for reason, count in sorted(self.lines_skipped.items()):
            logger.info(f"    - {reason}: {count}")
        logger.info(f"  无分隔符行数: {self.lines_unsplit}")
        logger.info(f"  元词过滤: {self.meta_rejected}")
        logger.info(f"  候选卡片: {self.candidates}")
        if self.fallback_accepted:
            logger.info(f"    - 宽松解析: {self.fallback_accepted}")
        logger.info(f"  完全重复: {self.duplicates_removed}")
        logger.info(f"  背面重复超限: {self.repetitions_removed}")
        logger.info(f"  最终保留: {self.kept} ({self.acceptance_rate:.0%})")
        logger.info("=" * 60)
