"""
日志配置模块

使用loguru配置日志系统。解析核心从不配置日志，只有CLI等入口调用 setup_logger。
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logger(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    verbose: bool = False,
) -> Optional[Path]:
    """
    配置loguru日志系统

    控制台输出写到 stderr，不会混入 stdout 上的解析结果。

    Args:
        level: 日志级别（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        log_file: 日志文件路径，为None时不写文件
        rotation: 日志文件轮转大小
        retention: 日志文件保留时间
        verbose: 是否显示详细日志（DEBUG级别）

    Returns:
        实际使用的日志文件路径，没有创建日志文件时返回None
    """
    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else level,
        colorize=True,
    )

    if log_file is None:
        return None

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG" if verbose else level,
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
        )
    except OSError as e:
        logger.warning(f"无法创建日志文件 {log_file}: {e}")
        return None

    logger.info(f"日志文件已创建: {log_file}")
    return log_file
