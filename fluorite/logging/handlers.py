"""掷骰日志装饰器

日志格式:
- 开始: ROLL | expr=xxx
- 成功: ROLL_OK | value=xxx | rolls=N | duration=xxxms
- 输入错误: ROLL_ERR | error=xxx | duration=xxxms
- 引擎异常: ROLL_BUG | expr=xxx | error=xxx (含完整堆栈)
"""
import time
from functools import wraps
from typing import Any, Callable

from loguru import logger


def log_roll(func: Callable) -> Callable:
    """记录每次表达式求值的输入、结果与耗时"""

    @wraps(func)
    def wrapper(text: str, *args, **kwargs) -> Any:
        # 避免循环导入
        from ..dice.errors import DiceError

        start_time = time.perf_counter()
        logger.debug(f"ROLL | expr={text!r}")

        try:
            result = func(text, *args, **kwargs)
        except DiceError as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.info(
                f"ROLL_ERR | expr={text!r} | error={type(e).__name__}: {e} | "
                f"duration={duration:.2f}ms"
            )
            raise
        except Exception as e:
            logger.exception(f"ROLL_BUG | expr={text!r} | error={type(e).__name__}: {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"ROLL_OK | value={result.value} | rolls={len(result.rolls)} | "
            f"duration={duration:.2f}ms"
        )
        return result

    return wrapper
