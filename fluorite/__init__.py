"""Fluorite: 骰点表达式计算器"""
from .dice import (
    DiceError,
    DiceEvaluationError,
    DiceRollError,
    DiceSyntaxError,
    RollInformation,
    parse_input,
)

__version__ = "0.3.0"

__all__ = [
    "parse_input",
    "RollInformation",
    "DiceError",
    "DiceSyntaxError",
    "DiceRollError",
    "DiceEvaluationError",
]
