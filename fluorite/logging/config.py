"""日志配置模块

引擎本身从不调用 setup_logging, 由命令行根据 Settings 配置。
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level:<8}</level> | "
    "<level>{message}</level>"
)

# 文件里保留调用位置, 方便对照 ROLL_BUG 的堆栈
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_path: Optional[Path] = None,
    rotation: str = "5 MB",
    retention: str = "14 days",
) -> None:
    """配置日志输出

    Args:
        level: stderr 的日志级别
        log_path: 日志文件目录; 为空时只输出到 stderr
        rotation: 日志文件轮转策略 (如 "5 MB", "1 day")
        retention: 旧日志保留策略 (如 "14 days")
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT, colorize=True, diagnose=False)

    if log_path is None:
        return

    log_path = Path(log_path)
    log_path.mkdir(parents=True, exist_ok=True)
    # 文件记录全部 ROLL 行, 不受控制台级别影响
    logger.add(
        log_path / "fluorite_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
    )
