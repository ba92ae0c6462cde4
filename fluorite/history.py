"""掷骰历史与快捷骰

两者都以 JSON 文件保存; 读取失败时返回空集合并记录警告。
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from loguru import logger

from .config import settings
from .dice import DiceError, RollInformation, parse_input


@dataclass
class HistoryEntry:
    """一条掷骰记录, result 与 error 恰有一个非空"""
    input: str
    result: Optional[RollInformation] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("HistoryEntry 需要且只能有 result 或 error 之一")

    @property
    def ok(self) -> bool:
        return self.result is not None

    def __str__(self) -> str:
        if self.result is not None:
            return f"{self.input} → {self.result.value}"
        return f"{self.input} → {self.error}"

    def to_dict(self) -> dict:
        return {
            "input": self.input,
            "result": self.result.to_dict() if self.result is not None else None,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        if not isinstance(data, dict):
            raise TypeError(f"历史记录必须是对象, 实际为 {type(data).__name__}")
        text, result, error = data["input"], data.get("result"), data.get("error")
        if not isinstance(text, str):
            raise TypeError("input 必须是字符串")
        if result is not None and not isinstance(result, dict):
            raise TypeError("result 必须是对象或 null")
        if error is not None and not isinstance(error, str):
            raise TypeError("error 必须是字符串或 null")
        return cls(
            input=text,
            result=RollInformation.from_dict(result) if result is not None else None,
            error=error,
        )


class RollHistory:
    """掷骰历史, 超过 max_entries 时丢弃最早的记录"""

    def __init__(self, max_entries: Optional[int] = None, entries: Optional[List[HistoryEntry]] = None):
        self.max_entries = settings.max_history_entries if max_entries is None else max_entries
        self._entries: List[HistoryEntry] = []
        for entry in entries or []:
            self._append(entry)

    def _append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            del self._entries[:overflow]

    def add(self, text: str, outcome: Union[RollInformation, str]) -> HistoryEntry:
        """记录一次结果 (RollInformation) 或错误信息 (str)"""
        if isinstance(outcome, RollInformation):
            entry = HistoryEntry(input=text, result=outcome)
        else:
            entry = HistoryEntry(input=text, error=outcome)
        self._append(entry)
        return entry

    def roll(self, text: str, **kwargs) -> HistoryEntry:
        """求值表达式并记录, 输入错误记录为 error 而不抛出"""
        try:
            outcome = parse_input(text, **kwargs)
        except DiceError as e:
            outcome = str(e)
        return self.add(text, outcome)

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def save(self, path: Path) -> None:
        data = [entry.to_dict() for entry in self._entries]
        Path(path).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path, max_entries: Optional[int] = None) -> "RollHistory":
        data = _read_json_list(path, "历史")
        entries = []
        for item in data:
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                logger.warning(f"跳过无效的历史记录 {item!r}: {e}")
        return cls(max_entries=max_entries, entries=entries)


@dataclass
class RollShortcut:
    """快捷骰: 名称 → 表达式"""
    name: str
    roll: str

    def to_dict(self) -> dict:
        return {"name": self.name, "roll": self.roll}

    @classmethod
    def from_dict(cls, data: dict) -> "RollShortcut":
        if not isinstance(data, dict):
            raise TypeError(f"快捷骰必须是对象, 实际为 {type(data).__name__}")
        name, roll = data["name"], data["roll"]
        if not isinstance(name, str) or not isinstance(roll, str):
            raise TypeError("name 和 roll 必须是字符串")
        return cls(name=name, roll=roll)


class ShortcutBook:
    """快捷骰列表, 新增的排在最前, 名称唯一"""

    def __init__(self, shortcuts: Optional[List[RollShortcut]] = None):
        self._shortcuts: List[RollShortcut] = list(shortcuts or [])

    def add(self, name: str, roll: str) -> bool:
        """新增快捷骰; 名称为空或已存在时不做修改并返回 False"""
        if not name or self.get(name) is not None:
            return False
        self._shortcuts.insert(0, RollShortcut(name=name, roll=roll))
        logger.debug(f"SHORTCUT_ADD | name={name} | roll={roll!r}")
        return True

    def remove(self, name: str) -> bool:
        before = len(self._shortcuts)
        self._shortcuts = [s for s in self._shortcuts if s.name != name]
        return len(self._shortcuts) != before

    def get(self, name: str) -> Optional[RollShortcut]:
        for shortcut in self._shortcuts:
            if shortcut.name == name:
                return shortcut
        return None

    def roll(self, name: str, history: RollHistory, **kwargs) -> HistoryEntry:
        """用快捷骰的表达式掷骰并记入历史"""
        shortcut = self.get(name)
        if shortcut is None:
            raise KeyError(f"快捷骰不存在: {name}")
        return history.roll(shortcut.roll, **kwargs)

    def __len__(self) -> int:
        return len(self._shortcuts)

    def __iter__(self) -> Iterator[RollShortcut]:
        return iter(self._shortcuts)

    def save(self, path: Path) -> None:
        data = [shortcut.to_dict() for shortcut in self._shortcuts]
        Path(path).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> "ShortcutBook":
        shortcuts = []
        for item in _read_json_list(path, "快捷骰"):
            try:
                shortcuts.append(RollShortcut.from_dict(item))
            except (KeyError, TypeError) as e:
                logger.warning(f"跳过无效的快捷骰 {item!r}: {e}")
        return cls(shortcuts)


def _read_json_list(path: Path, label: str) -> list:
    """读取 JSON 数组文件, 文件不存在或格式错误时返回空列表"""
    path = Path(path)
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"{label}文件读取失败 {path}: {e}")
        return []
    if not isinstance(data, list):
        logger.warning(f"{label}文件格式错误 {path}: 顶层不是数组")
        return []
    return data
