"""
CLI接口模块

使用Typer实现命令行界面。CLI 只读取文件并输出到 stdout，不调用模型。
"""

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from flashparse.cli.preview_handler import show_cards_preview
from flashparse.core.card_builder import CardBatchBuilder
from flashparse.core.config_loader import load_config, save_config
from flashparse.core.diagnostics import combine_hooks, loguru_hook
from flashparse.core.prompt_builder import PromptBuilder
from flashparse.core.stats import ParseStats
from flashparse.exceptions import FlashParseError
from flashparse.models.config import AppConfig
from flashparse.utils.logger import setup_logger

app = typer.Typer(
    name="flashparse",
    help="闪卡解析工具 - 把模型生成的自由文本整理为去重后的正反面卡片",
    add_completion=False,
)


def _read_input(input_path: Path) -> str:
    """读取输入文件，"-" 表示标准输入"""
    if str(input_path) == "-":
        return sys.stdin.read()
    return input_path.read_text(encoding="utf-8")


def _load_app_config(config_path: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_path=config_path)
    except FlashParseError as e:
        logger.exception(f"加载配置失败: {e}")
        typer.echo(f"错误: 加载配置失败: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def parse(
    input: Path = typer.Option(
        ...,
        "--input",
        "-i",
        help='模型响应文件路径（"-" 表示标准输入）',
    ),
    num_cards: Optional[int] = typer.Option(
        None,
        "--num-cards",
        "-n",
        help="请求的卡片数量（指定后会截断并评估产出率）",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="禁用宽松解析后备",
    ),
    output_format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="输出格式 (json/table)",
    ),
    show_stats: bool = typer.Option(
        False,
        "--stats",
        help="输出解析统计信息",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="显示详细日志（包括每一行的过滤原因）",
    ),
):
    """
    解析模型响应

    把模型输出的自由文本解析为卡片，以 JSON 或表格形式输出。
    """
    setup_logger(verbose=verbose)

    output_format = output_format.lower()
    if output_format not in ("json", "table"):
        typer.echo(f"错误: 不支持的输出格式: {output_format}", err=True)
        raise typer.Exit(1)

    app_config = _load_app_config(config)
    if strict:
        app_config.parser.lenient_fallback = False

    try:
        raw_text = _read_input(input)
    except FileNotFoundError as e:
        logger.exception(f"文件不存在: {e}")
        typer.echo(f"错误: 文件不存在: {input}", err=True)
        raise typer.Exit(1)
    except (OSError, UnicodeDecodeError) as e:
        logger.exception(f"读取输入失败: {e}")
        typer.echo(f"错误: 读取输入失败: {e}", err=True)
        raise typer.Exit(1)

    stats = ParseStats()
    hook = combine_hooks(stats, loguru_hook if verbose else None)
    builder = CardBatchBuilder(app_config.parser, on_event=hook)

    if num_cards is None:
        cards = builder.parse(raw_text)
        result = None
        payload = [card.to_record() for card in cards]
    else:
        try:
            result = builder.build(raw_text, num_cards)
        except FlashParseError as e:
            typer.echo(f"错误: {e}", err=True)
            raise typer.Exit(1)
        cards = result.cards
        payload = result.model_dump(mode="json", exclude={"raw_text"})

    if show_stats:
        stats.log_summary()

    if output_format == "table":
        show_cards_preview(cards, result)
    else:
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))

    if not cards:
        typer.echo("错误: 没有解析出任何卡片", err=True)
        raise typer.Exit(1)


@app.command()
def prompt(
    description: str = typer.Option(
        ...,
        "--description",
        "-d",
        help="卡片主题描述",
    ),
    num_cards: int = typer.Option(
        20,
        "--num-cards",
        "-n",
        help="需要的卡片数量",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="显示详细日志",
    ),
):
    """
    渲染提示词

    输出发送给模型的少样本提示词（不调用模型）。
    """
    setup_logger(verbose=verbose)
    app_config = _load_app_config(config)

    try:
        rendered = PromptBuilder(app_config.parser).render(description, num_cards)
    except FlashParseError as e:
        typer.echo(f"错误: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(rendered)


@app.command("config")
def config_command(
    init: bool = typer.Option(
        False,
        "--init",
        help="初始化配置文件",
    ),
    show: bool = typer.Option(
        False,
        "--show",
        help="显示当前配置",
    ),
    config_path: Path = typer.Option(
        Path(".config.yml"),
        "--path",
        help="配置文件路径",
    ),
):
    """
    配置管理命令

    初始化或显示配置文件。
    """
    if init:
        save_config(AppConfig(), config_path)
        typer.echo(f"✓ 配置文件已创建: {config_path}")

    elif show:
        app_config = _load_app_config(config_path if config_path.exists() else None)
        parser_config = app_config.parser
        typer.echo("\n=== 当前配置 ===")
        typer.echo("\n解析配置:")
        typer.echo(f"  行长度范围: {parser_config.min_line_length} - {parser_config.max_line_length}")
        typer.echo(f"  背面重复上限: {parser_config.repetition_ceiling}")
        typer.echo(f"  重复处理策略: {parser_config.repetition_policy.value}")
        typer.echo(f"  低产出阈值: {parser_config.low_yield_threshold:.0%}")
        typer.echo(f"  请求放大倍数: {parser_config.overgeneration_factor}")
        typer.echo(f"  最大请求数量: {parser_config.max_requested_cards}")
        typer.echo(f"  宽松解析后备: {'启用' if parser_config.lenient_fallback else '禁用'}")
        typer.echo(f"  额外跳过规则: {len(parser_config.extra_skip_rules)}")
        typer.echo(f"  额外元词: {len(parser_config.extra_meta_words)}")

    else:
        typer.echo("请使用 --init 或 --show 选项")
        raise typer.Exit(1)


def main():
    """CLI入口函数"""
    app()


if __name__ == "__main__":
    main()
