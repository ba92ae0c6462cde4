"""骰点表达式求值

每一层运算链先求出全部操作数 (递归进入括号), 得到
[值, 运算符, 值, 运算符, ...] 的扁平序列, 再按优先级分三遍归约:
    1. 骰点 d
    2. 乘除取模 * / %
    3. 加减 + -
每遍从左到右扫描, 把 (左, 运算符, 右) 三元组合并为一个 RollInformation,
骰点原文和骰点结果按左、新、右的顺序拼接, 从不重排。
"""
from decimal import Decimal, DecimalException, localcontext
from typing import Callable, List, Optional

from ..config import settings
from ..logging import log_roll
from .errors import DiceEvaluationError
from .models import (
    PLACEHOLDER,
    BinaryChain,
    Number,
    ParenGroup,
    RollInformation,
    UnaryOp,
)
from .parser import DiceParser, clean_input
from .roller import DiceRoller

DICE_OPERATORS = ("d",)
MULTIPLICATIVE_OPERATORS = ("*", "/", "%")
ADDITIVE_OPERATORS = ("+", "-")


def _reduce_tier(
    values: List[RollInformation],
    operators: List[str],
    tier: tuple,
    combine: Callable[[RollInformation, str, RollInformation], RollInformation],
) -> None:
    """原地归约 values/operators 中属于 tier 的全部运算符, 左结合"""
    i = 0
    while i < len(operators):
        if operators[i] in tier:
            values[i:i + 2] = [combine(values[i], operators[i], values[i + 1])]
            del operators[i]
        else:
            i += 1


class DiceEvaluator:
    """语法树求值器"""

    def __init__(self, roller: Optional[DiceRoller] = None, precision: Optional[int] = None):
        self.roller = roller or DiceRoller()
        self.precision = precision or settings.decimal_precision

    def evaluate(self, tree: BinaryChain) -> RollInformation:
        with localcontext() as ctx:
            ctx.prec = self.precision
            return self._evaluate_chain(tree)

    def _evaluate_chain(self, chain: BinaryChain) -> RollInformation:
        values = [self._evaluate_operand(operand) for operand in chain.operands]
        operators = list(chain.operators)

        _reduce_tier(values, operators, DICE_OPERATORS, self._combine_dice)
        _reduce_tier(values, operators, MULTIPLICATIVE_OPERATORS, self._combine_arithmetic)
        _reduce_tier(values, operators, ADDITIVE_OPERATORS, self._combine_arithmetic)

        if len(values) != 1 or operators:
            raise RuntimeError(f"归约后残留运算符: {operators}")
        return values[0]

    def _evaluate_operand(self, node) -> RollInformation:
        if isinstance(node, Number):
            return RollInformation.number(node.text, node.value)
        if isinstance(node, ParenGroup):
            inner = self._evaluate_chain(node.inner)
            return RollInformation(
                value=inner.value,
                processed_string=f"({inner.processed_string})",
                original_roll_texts=inner.original_roll_texts,
                rolls=inner.rolls,
            )
        if isinstance(node, UnaryOp):
            operand = self._evaluate_operand(node.operand)
            value = operand.value * -1 if node.sign == "-" else operand.value
            return RollInformation(
                value=value,
                processed_string=f"{node.sign}{operand.processed_string}",
                original_roll_texts=operand.original_roll_texts,
                rolls=operand.rolls,
            )
        raise RuntimeError(f"未知的语法树节点: {node!r}")

    def _combine_dice(self, left: RollInformation, op: str, right: RollInformation) -> RollInformation:
        total, rolls = self.roller.roll_dice(left.value, right.value)
        text = f"{left.roll_text()}d{right.roll_text()}"
        return RollInformation(
            value=total,
            processed_string=PLACEHOLDER,
            original_roll_texts=left.original_roll_texts + (text,) + right.original_roll_texts,
            rolls=left.rolls + (tuple(rolls),) + right.rolls,
        )

    def _combine_arithmetic(self, left: RollInformation, op: str, right: RollInformation) -> RollInformation:
        try:
            value = apply_operator(op, left.value, right.value)
        except DecimalException as e:
            # 如取模的商超出精度
            raise DiceEvaluationError(
                f"无法计算 {left.value}{op}{right.value}: {type(e).__name__}"
            ) from e
        return RollInformation(
            value=value,
            processed_string=f"{left.processed_string}{op}{right.processed_string}",
            original_roll_texts=left.original_roll_texts + right.original_roll_texts,
            rolls=left.rolls + right.rolls,
        )


def apply_operator(op: str, left: Decimal, right: Decimal) -> Decimal:
    """十进制四则运算与取模 (取模结果与被除数同号)"""
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            raise DiceEvaluationError(f"除数不能为零: {left}/{right}")
        return left / right
    if op == "%":
        if right == 0:
            raise DiceEvaluationError(f"取模的除数不能为零: {left}%{right}")
        return left % right
    raise RuntimeError(f"未知的运算符: {op!r}")


@log_roll
def parse_input(
    text: str,
    roller: Optional[DiceRoller] = None,
    precision: Optional[int] = None,
) -> RollInformation:
    """清洗、解析并求值一个骰点表达式

    Args:
        text: 用户输入, 非法字符会被丢弃
        roller: 骰点执行器, 默认使用全局随机数
        precision: 十进制运算的有效位数, 默认读取配置

    Returns:
        RollInformation

    Raises:
        DiceSyntaxError: 表达式不合文法
        DiceRollError: 骰子数量/面数不合法
        DiceEvaluationError: 除以零
    """
    cleaned = clean_input(text)
    tree = DiceParser.parse(cleaned)
    return DiceEvaluator(roller, precision).evaluate(tree)
