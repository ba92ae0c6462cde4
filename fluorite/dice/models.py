"""语法树节点与骰点结果模型"""
import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence, Tuple, Union

# processed_string 中骰点结果的占位符
PLACEHOLDER = "{}"


# ---------------------------------------------------------------------------
# 语法树
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Number:
    """数字字面量"""

    text: str  # 去除空白后的原文, 如 "2.50"
    value: Decimal


@dataclass(frozen=True)
class ParenGroup:
    """括号分组"""

    inner: "BinaryChain"


@dataclass(frozen=True)
class UnaryOp:
    """一元正负号, 只作用于数字或括号分组"""

    sign: str  # "+" | "-"
    operand: Union[Number, ParenGroup]


@dataclass(frozen=True)
class BinaryChain:
    """同一层级的二元运算链: operands[0] op[0] operands[1] op[1] ..."""

    operands: Tuple["Operand", ...]
    operators: Tuple[str, ...] = ()


Operand = Union[Number, ParenGroup, UnaryOp]
Node = Union[Number, ParenGroup, UnaryOp, BinaryChain]


# ---------------------------------------------------------------------------
# 结果
# ---------------------------------------------------------------------------

def format_string_with_rolls(string: str, roll_texts: Iterable[str]) -> str:
    """按顺序把占位符替换为骰点原文, 如 "{}+1" -> "2d6+1" """
    formatted = string
    for text in roll_texts:
        formatted = formatted.replace(PLACEHOLDER, text, 1)
    return formatted


def format_string_with_results(string: str, rolls: Iterable[Sequence[Decimal]]) -> str:
    """按顺序把占位符替换为每组骰点结果, 如 "{}+1" -> "[3, 5]+1" """
    formatted = string
    for group in rolls:
        joined = ", ".join(str(roll) for roll in group)
        formatted = formatted.replace(PLACEHOLDER, f"[{joined}]", 1)
    return formatted


@dataclass(frozen=True)
class RollInformation:
    """骰点表达式求值结果

    value: 最终数值
    processed_string: 化简后的表达式文本, 每个骰点位置为一个占位符
    original_roll_texts: 每个骰点项的原文, 如 "2d6"
    rolls: 每个骰点项的单骰结果, 与 original_roll_texts 一一对应
    """

    value: Decimal
    processed_string: str
    original_roll_texts: Tuple[str, ...] = field(default_factory=tuple)
    rolls: Tuple[Tuple[Decimal, ...], ...] = field(default_factory=tuple)

    def __post_init__(self):
        if len(self.original_roll_texts) != len(self.rolls):
            raise ValueError(
                f"骰点原文与结果数量不一致: "
                f"{len(self.original_roll_texts)} != {len(self.rolls)}"
            )

    @classmethod
    def number(cls, text: str, value: Decimal) -> "RollInformation":
        return cls(value=value, processed_string=text)

    def roll_text(self) -> str:
        """还原骰点原文的完整表达式"""
        return format_string_with_rolls(self.processed_string, self.original_roll_texts)

    def result_text(self) -> str:
        """带每个骰子结果的完整表达式"""
        return format_string_with_results(self.processed_string, self.rolls)

    def to_dict(self) -> dict:
        """转换为字典 (Decimal 以字符串保存, 避免精度丢失)"""
        return {
            "value": str(self.value),
            "processed_string": self.processed_string,
            "original_roll_texts": list(self.original_roll_texts),
            "rolls": [[str(roll) for roll in group] for group in self.rolls],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> "RollInformation":
        return cls(
            value=Decimal(data["value"]),
            processed_string=data["processed_string"],
            original_roll_texts=tuple(data.get("original_roll_texts", [])),
            rolls=tuple(
                tuple(Decimal(roll) for roll in group)
                for group in data.get("rolls", [])
            ),
        )

    def __str__(self) -> str:
        if not self.rolls:
            return f"{self.processed_string} = {self.value}"
        return f"{self.roll_text()} = {self.result_text()} = {self.value}"
