"""骰点引擎异常"""
from typing import Optional


class DiceError(ValueError):
    """骰点表达式错误基类，str(error) 即面向用户的错误描述"""


class DiceSyntaxError(DiceError):
    """语法错误: 表达式无法按文法解析"""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position  # 清洗后文本中的出错位置


class DiceRollError(DiceError):
    """掷骰参数校验失败: 数量/面数不合法"""


class DiceEvaluationError(DiceError):
    """算术求值失败: 除以零等"""
