"""
诊断事件模块

解析管道不直接写日志，而是把过滤决策作为事件发给可注入的回调。
不传回调时管道保持纯函数；需要日志时传入 loguru_hook。
"""

from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger


@dataclass(frozen=True)
class ParseEvent:
    """
    解析事件

    Attributes:
        stage: 产生事件的阶段（classify/split/meta/dedup/fallback/accept）
        reason: 简短的原因标记（如 too_short、skip_phrase、duplicate）
        text: 事件涉及的文本
        line: 源行号（去重阶段没有行号）
        detail: 补充说明
    """

    stage: str
    reason: str
    text: str = ""
    line: Optional[int] = None
    detail: str = ""


DiagnosticHook = Callable[[ParseEvent], None]


def emit(hook: Optional[DiagnosticHook], event: ParseEvent) -> None:
    """向回调发送事件（回调为 None 时什么都不做）"""
    if hook is not None:
        hook(event)


def loguru_hook(event: ParseEvent) -> None:
    """
    以 DEBUG 级别记录解析事件

    Args:
        event: 解析事件
    """
    location = f"第 {event.line} 行" if event.line is not None else "批次"
    message = f"[{event.stage}] {location} {event.reason}: {event.text!r}"
    if event.detail:
        message += f" ({event.detail})"
    logger.debug(message)


def combine_hooks(*hooks: Optional[DiagnosticHook]) -> Optional[DiagnosticHook]:
    """
    合并多个回调，事件依次分发给每一个

    Args:
        hooks: 回调列表，None 会被忽略

    Returns:
        合并后的回调；没有有效回调时返回 None
    """
    active = [hook for hook in hooks if hook is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]

    def _fan_out(event: ParseEvent) -> None:
        for hook in active:
            hook(event)

    return _fan_out
