#!/usr/bin/env python3
"""
解析回归检查脚本

用一组典型的模型输出检查解析管道得到的卡片数量，任一用例失败时以非零状态退出。

用法:
    python scripts/check_parsing.py
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger  # noqa: E402

from flashparse.core.response_parser import parse_flashcards  # noqa: E402
from flashparse.core.text_normalizer import normalize_card_text  # noqa: E402

CASES = [
    ("管道分隔", "apple | appel\nbread | brood\ncheese | kaas", 3),
    ("带编号", "1. apple | appel\n2. bread | brood\n3. cheese | kaas", 3),
    ("markdown 格式", "**apple** | appel\n_bread_ | brood\n~~cheese~~ | kaas", 3),
    ("冒号分隔", "apple: appel\nbread: brood\ncheese: kaas", 3),
    ("大小写混合", "APPLE | APPEL\nBread | Brood\nChEeSe | KaAs", 3),
    ("多余空白", "  apple   |   appel  \n  bread   |   brood  \n  cheese  |   kaas  ", 3),
    ("开场白", "Here are your flashcards:\napple | appel\nbread | brood\ncheese | kaas", 3),
    ("连字符分隔", "apple - appel\nbread - brood\ncheese - kaas", 3),
    (
        "元标签",
        "term | stroopwafel\ntranslation | dutch waffle\nno numbering | 1, 2, 3\n"
        "stroopwafel | syrup waffle\npoffertjes | small pancakes\nbitterballen | fried meat balls",
        3,
    ),
    ("纯数字行", "1, 2, 3, 4, 5, 6, 7, 8, 9, 10\napple | appel\nbread | brood", 2),
    (
        "说明标签",
        "translation | bread with butter\nexplanation | this is a classic dutch dish\n"
        "translation | pancakes\nexplanation | quick and easy to make\n"
        "stroopwafel | syrup waffle\npoffertjes | small pancakes",
        2,
    ),
]

NORMALIZATION_CASES = [
    ("HELLO", "hello"),
    ("  spaced  ", "spaced"),
    ("1. numbered", "1. numbered"),
    ("apple (appel)", "apple"),
    ('"quoted"', "quoted"),
]


def main() -> int:
    """运行所有用例，返回失败数量"""
    failed = 0

    logger.info("检查卡片解析")
    for name, text, expected in CASES:
        cards = parse_flashcards(text)
        if len(cards) == expected:
            sample = f'"{cards[0].front}" -> "{cards[0].back}"' if cards else "无"
            logger.info(f"✓ {name}: {len(cards)} 张卡片，示例 {sample}")
        else:
            logger.error(f"✗ {name}: 期望 {expected} 张，实际 {len(cards)} 张: {cards}")
            failed += 1

    logger.info("检查字段规范化")
    for text, expected in NORMALIZATION_CASES:
        result = normalize_card_text(text)
        if result == expected:
            logger.info(f"✓ {text!r} -> {result!r}")
        else:
            logger.error(f"✗ {text!r} -> {result!r}（期望 {expected!r}）")
            failed += 1

    total = len(CASES) + len(NORMALIZATION_CASES)
    logger.info(f"通过 {total - failed}/{total}")
    return failed


if __name__ == "__main__":
    sys.exit(1 if main() else 0)
