"""骰点表达式解析器

文法 (由内向外绑定):
    number            := 数字 [ '.' ] 数字      (至少一个数字, 数字间可夹空格)
    non_operator      := number | '(' legitimate_sequence ')'
    paired_unop       := ('+' | '-') non_operator
    non_binop         := number | paren_block | paired_unop
    binop             := 'd' | '+' | '-' | '*' | '/' | '%'
    legitimate_sequence := non_binop (binop non_binop)*
    full_expression   := legitimate_sequence, 必须消耗全部输入
"""
import re
from decimal import Decimal
from typing import List, Optional

from .errors import DiceSyntaxError
from .models import BinaryChain, Number, ParenGroup, UnaryOp

# 合法输入字符, 其余字符在解析前被丢弃
VALID_INPUT_CHARS = frozenset("0123456789.d+-*/%() ")

EMPTY_EXPRESSION = "表达式为空"
EMPTY_PARENS = "括号内没有表达式"
UNMATCHED_OPEN_PAREN = "括号未闭合: 缺少 ')'"
UNMATCHED_CLOSE_PAREN = "多余的右括号: 缺少 '('"
LEADING_OPERATOR = "运算符 '{op}' 前缺少操作数"
TRAILING_OPERATOR = "运算符 '{op}' 后缺少操作数"
CONSECUTIVE_OPERATORS = "连续出现运算符 '{prev}' 和 '{op}'"
CONSECUTIVE_OPERANDS = "两个操作数之间缺少运算符"
SIGN_WITHOUT_OPERAND = "正负号 '{op}' 后必须是数字或括号"
DECIMAL_WITHOUT_DIGITS = "小数点前后都没有数字"
MULTIPLE_DECIMAL_POINTS = "一个数字中有多个小数点"
NESTING_TOO_DEEP = "括号嵌套层数过深"


def clean_input(text: str) -> str:
    """丢弃合法字符集之外的字符, 从不报错"""
    return "".join(c for c in text if c in VALID_INPUT_CHARS)


class DiceParser:
    """骰点表达式解析器 (递归下降)"""

    # 数字之间允许夹空格, 如 "1 0" 视为 10
    NUMBER_PATTERN = re.compile(r"[0-9.](?: *[0-9.])*")
    BINARY_OPERATORS = "d+-*/%"
    UNARY_OPERATORS = "+-"

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._open_parens: List[int] = []  # 未闭合左括号的位置
        self._last_operator: Optional[str] = None

    @classmethod
    def parse(cls, expression: str) -> BinaryChain:
        """解析已清洗的表达式, 失败抛出 DiceSyntaxError"""
        parser = cls(expression)
        parser._skip_spaces()
        if parser._at_end():
            raise DiceSyntaxError(EMPTY_EXPRESSION, 0)
        try:
            return parser._parse_sequence()
        except RecursionError:
            raise DiceSyntaxError(NESTING_TOO_DEEP, parser.pos) from None

    @classmethod
    def is_valid(cls, expression: str) -> bool:
        """检查表达式是否能通过解析 (会先清洗)"""
        try:
            cls.parse(clean_input(expression))
        except DiceSyntaxError:
            return False
        return True

    # -- 词法辅助 ---------------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos]

    def _skip_spaces(self) -> None:
        while not self._at_end() and self._peek() == " ":
            self.pos += 1

    def _error(self, message: str, position: Optional[int] = None) -> DiceSyntaxError:
        return DiceSyntaxError(message, self.pos if position is None else position)

    # -- 产生式 -----------------------------------------------------------

    def _parse_sequence(self) -> BinaryChain:
        """legitimate_sequence: 遇到输入结尾或 ')' 时返回"""
        operands = [self._parse_operand(after_operator=False)]
        operators: List[str] = []

        while True:
            self._skip_spaces()
            if self._at_end():
                if self._open_parens:
                    raise self._error(UNMATCHED_OPEN_PAREN, self._open_parens[-1])
                break

            char = self._peek()
            if char == ")":
                if not self._open_parens:
                    raise self._error(UNMATCHED_CLOSE_PAREN)
                break
            if char in self.BINARY_OPERATORS:
                self.pos += 1
                self._last_operator = char
                operators.append(char)
                operands.append(self._parse_operand(after_operator=True))
                continue

            raise self._error(CONSECUTIVE_OPERANDS)

        return BinaryChain(operands=tuple(operands), operators=tuple(operators))

    def _parse_operand(self, after_operator: bool):
        """non_binop"""
        self._skip_spaces()

        if self._at_end():
            if after_operator:
                raise self._error(TRAILING_OPERATOR.format(op=self._last_operator), self.pos - 1)
            raise self._error(UNMATCHED_OPEN_PAREN, self._open_parens[-1])

        char = self._peek()
        if char == ")":
            if after_operator:
                raise self._error(TRAILING_OPERATOR.format(op=self._last_operator))
            if self._open_parens:
                raise self._error(EMPTY_PARENS)
            raise self._error(UNMATCHED_CLOSE_PAREN)

        if char in self.UNARY_OPERATORS:
            sign_pos = self.pos
            self.pos += 1
            return UnaryOp(sign=char, operand=self._parse_non_operator(sign=char, sign_pos=sign_pos))

        if char in self.BINARY_OPERATORS:
            if after_operator:
                raise self._error(CONSECUTIVE_OPERATORS.format(prev=self._last_operator, op=char))
            raise self._error(LEADING_OPERATOR.format(op=char))

        return self._parse_non_operator()

    def _parse_non_operator(self, sign: Optional[str] = None, sign_pos: Optional[int] = None):
        """non_operator: 数字或括号分组"""
        self._skip_spaces()
        char = None if self._at_end() else self._peek()

        if char == "(":
            return self._parse_paren_block()
        if char is not None and (char.isdigit() or char == "."):
            return self._parse_number()
        if sign is not None:
            raise self._error(SIGN_WITHOUT_OPERAND.format(op=sign), sign_pos)
        raise RuntimeError(f"解析器状态异常: 位置 {self.pos} 处不是数字或括号")

    def _parse_paren_block(self) -> ParenGroup:
        self._open_parens.append(self.pos)
        self.pos += 1
        inner = self._parse_sequence()
        # _parse_sequence 只会停在匹配的 ')' 上
        self.pos += 1
        self._open_parens.pop()
        return ParenGroup(inner=inner)

    def _parse_number(self) -> Number:
        start = self.pos
        match = self.NUMBER_PATTERN.match(self.text, start)
        self.pos = match.end()

        text = match.group().replace(" ", "")
        if text.count(".") > 1:
            raise self._error(MULTIPLE_DECIMAL_POINTS, start)
        if text == ".":
            raise self._error(DECIMAL_WITHOUT_DIGITS, start)

        return Number(text=text, value=Decimal(text))
