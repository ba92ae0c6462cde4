"""测试公共工具

ScriptedRandom 按给定顺序返回骰点结果, 用于得到确定的掷骰。
"""
from typing import Iterable, List, Tuple

import pytest
from loguru import logger

from fluorite.config import settings
from fluorite.dice import DiceRoller


class ScriptedRandom:
    """按脚本返回 randint 结果, 并记录每次调用的范围"""

    def __init__(self, values: Iterable[int]):
        self.values: List[int] = list(values)
        self.calls: List[Tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.values:
            raise AssertionError(f"脚本中的骰点结果已用完 (第 {len(self.calls)} 次调用)")
        value = self.values.pop(0)
        assert a <= value <= b, f"脚本值 {value} 不在 [{a}, {b}] 内"
        return value


@pytest.fixture
def scripted():
    """返回工厂: scripted(3, 5) -> (DiceRoller, ScriptedRandom)"""

    def factory(*values: int):
        rng = ScriptedRandom(values)
        return DiceRoller(rng=rng), rng

    return factory


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """测试中不读写真实的日志/历史/快捷骰文件"""
    monkeypatch.setattr(settings, "log_path", None)
    monkeypatch.setattr(settings, "history_file", None)
    monkeypatch.setattr(settings, "shortcuts_file", None)
    yield
    logger.remove()
