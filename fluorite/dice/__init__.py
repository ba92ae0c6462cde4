"""骰点模块"""
from .errors import DiceError, DiceEvaluationError, DiceRollError, DiceSyntaxError
from .evaluator import DiceEvaluator, parse_input
from .models import (
    PLACEHOLDER,
    RollInformation,
    format_string_with_results,
    format_string_with_rolls,
)
from .parser import DiceParser, clean_input
from .roller import DiceRoller

__all__ = [
    "parse_input",
    "DiceParser", "DiceEvaluator", "DiceRoller", "clean_input",
    "RollInformation", "PLACEHOLDER",
    "format_string_with_rolls", "format_string_with_results",
    "DiceError", "DiceSyntaxError", "DiceRollError", "DiceEvaluationError",
]
