"""骰点执行器"""
import random
from decimal import ROUND_FLOOR, Decimal
from typing import List, Optional, Protocol, Tuple

from ..config import settings
from .errors import DiceRollError


class RandomSource(Protocol):
    """随机数来源, random 模块本身或 random.Random 实例均满足"""

    def randint(self, a: int, b: int) -> int: ...


def is_integral(value: Decimal) -> bool:
    """数值是否等于其向下取整"""
    return value == value.to_integral_value(rounding=ROUND_FLOOR)


class DiceRoller:
    """骰点执行器

    默认使用 random 模块的全局生成器 (可并发调用);
    测试时可注入任意带 randint(a, b) 的对象以获得确定结果。
    """

    def __init__(self, rng: Optional[RandomSource] = None, max_dice: Optional[int] = None):
        self._rng = rng or random
        self.max_dice = max_dice if max_dice is not None else settings.max_dice

    def roll_die(self, sides: int) -> int:
        """掷一个 sides 面骰, 结果在 [1, sides]"""
        return self._rng.randint(1, sides)

    def roll_dice(self, count: Decimal, sides: Decimal) -> Tuple[Decimal, List[Decimal]]:
        """掷 count 个 sides 面骰, 返回 (总和, 按掷出顺序的单骰结果)

        校验顺序: 数量为整数, 面数为整数, 数量非负, 面数为正, 数量不超过上限。
        """
        if not is_integral(count):
            raise DiceRollError(f"骰子数量必须为整数: {count}")
        if not is_integral(sides):
            raise DiceRollError(f"骰子面数必须为整数: {sides}")
        if count < 0:
            raise DiceRollError(f"骰子数量不能为负数: {count}")
        if sides <= 0:
            raise DiceRollError(f"骰子面数必须为正数: {sides}")
        if count == 0:
            return Decimal(0), []

        # 通过整数校验后才转换
        number = int(count)
        if number > self.max_dice:
            raise DiceRollError(f"骰子数量过多: {number} (上限 {self.max_dice})")

        faces = int(sides)
        draws = [self.roll_die(faces) for _ in range(number)]
        # 以整数求和, 不受十进制精度影响
        return Decimal(sum(draws)), [Decimal(d) for d in draws]
