"""
预览处理模块

负责在终端以表格形式显示解析出的卡片。
"""

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from flashparse.models.card import Card
from flashparse.models.result import GenerationResult, GenerationStatus

_STATUS_STYLES = {
    GenerationStatus.SUCCESS.value: "green",
    GenerationStatus.SHORTFALL.value: "yellow",
    GenerationStatus.LOW_YIELD.value: "red",
    GenerationStatus.EMPTY.value: "red",
}


def build_cards_table(cards: Sequence[Card], title: str = "卡片预览") -> Table:
    """
    构建卡片表格

    Args:
        cards: 卡片列表
        title: 表格标题

    Returns:
        rich 表格
    """
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("正面 (front)", style="cyan")
    table.add_column("背面 (back)", style="magenta")

    for index, card in enumerate(cards, 1):
        table.add_row(str(index), Text(card.front), Text(card.back))

    return table


def show_cards_preview(
    cards: Sequence[Card],
    result: Optional[GenerationResult] = None,
    console: Optional[Console] = None,
) -> None:
    """
    显示卡片预览以及批次结果提示

    Args:
        cards: 卡片列表
        result: 批次结果（可选，用于显示产出率和提示信息）
        console: rich 控制台，为None时新建
    """
    console = console or Console()

    if cards:
        console.print(build_cards_table(cards))
    else:
        console.print("[red]没有解析出任何卡片[/red]")

    if result is None:
        console.print(f"共 {len(cards)} 张卡片")
        return

    style = _STATUS_STYLES.get(result.status, "white")
    console.print(
        f"[{style}]状态: {result.status}[/{style}]  "
        f"{result.count}/{result.requested_count} ({result.yield_ratio:.0%})"
    )
    message = result.warning or result.error
    if message:
        console.print(message, style=style, markup=False)
