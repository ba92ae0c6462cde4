"""结果模型与展开格式单元测试"""
import dataclasses
import json
from decimal import Decimal

import pytest

from fluorite.dice import (
    RollInformation,
    format_string_with_results,
    format_string_with_rolls,
)

D = Decimal


@pytest.fixture
def info():
    return RollInformation(
        value=D(14),
        processed_string="{}+({}*2)",
        original_roll_texts=("1d4", "2d6"),
        rolls=((D(4),), (D(2), D(3))),
    )


class TestFormatting:
    """测试占位符替换"""

    def test_rolls(self):
        """按顺序替换为骰点原文"""
        assert format_string_with_rolls("{}+{}", ["1d4", "2d6"]) == "1d4+2d6"

    def test_results(self):
        """按顺序替换为结果列表"""
        assert format_string_with_results("{}+{}", [[D(4)], [D(2), D(3)]]) == "[4]+[2, 3]"

    def test_empty_group(self):
        """空结果组显示为 []"""
        assert format_string_with_results("{}", [[]]) == "[]"

    def test_no_placeholders(self):
        """没有占位符时原样返回"""
        assert format_string_with_results("2+3", []) == "2+3"

    def test_instance_helpers(self, info):
        """实例方法"""
        assert info.roll_text() == "1d4+(2d6*2)"
        assert info.result_text() == "[4]+([2, 3]*2)"

    def test_str(self, info):
        """字符串表示包含原文、结果和总计"""
        assert str(info) == "1d4+(2d6*2) = [4]+([2, 3]*2) = 14"

    def test_str_without_rolls(self):
        """无骰点时只显示算式和值"""
        assert str(RollInformation.number("5", D(5))) == "5 = 5"


class TestRollInformation:
    """测试结果模型"""

    def test_length_mismatch_rejected(self):
        """原文与结果数量必须一致"""
        with pytest.raises(ValueError, match="数量不一致"):
            RollInformation(value=D(1), processed_string="{}", original_roll_texts=("1d1",))

    def test_frozen(self, info):
        """结果不可修改"""
        with pytest.raises(dataclasses.FrozenInstanceError):
            info.value = D(0)

    def test_to_dict(self, info):
        """Decimal 以字符串保存"""
        assert info.to_dict() == {
            "value": "14",
            "processed_string": "{}+({}*2)",
            "original_roll_texts": ["1d4", "2d6"],
            "rolls": [["4"], ["2", "3"]],
        }

    def test_from_dict(self, info):
        """从字典恢复"""
        restored = RollInformation.from_dict(json.loads(info.to_json()))
        assert restored == info

    def test_fractional_value_preserved(self):
        """小数值不丢失精度"""
        data = {"value": "0.3333333333333333333333333333", "processed_string": "1/3"}
        assert RollInformation.from_dict(data).value == D("0.3333333333333333333333333333")
