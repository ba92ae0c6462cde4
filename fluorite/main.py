"""命令行入口

用法:
    fluorite 2d6+3
    fluorite -v "(2 + 3) * 2d6"
    echo "1d20\n3d4" | fluorite
"""
import argparse
import sys
from typing import List, Optional

from loguru import logger

from .config import settings
from .dice import RollInformation
from .history import RollHistory, ShortcutBook
from .logging import setup_logging as configure_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """解析命令行参数"""
    parser = argparse.ArgumentParser(prog="fluorite", description="骰点表达式计算器")
    parser.add_argument(
        "roll",
        nargs="*",
        help="骰点表达式, 多个参数以空格连接; 省略时逐行读取标准输入"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="显示骰点原文和每个骰子的结果"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="启用 DEBUG 日志级别"
    )
    parser.add_argument(
        "--shortcut", "-s",
        metavar="NAME",
        help="使用已保存的快捷骰"
    )
    parser.add_argument(
        "--add-shortcut",
        nargs=2,
        metavar=("NAME", "ROLL"),
        help="保存快捷骰"
    )
    parser.add_argument(
        "--list-shortcuts",
        action="store_true",
        help="列出已保存的快捷骰"
    )
    return parser.parse_args(argv)


def format_result(result: RollInformation, verbose: bool = False) -> str:
    if not verbose:
        return str(result.value)
    return "\n".join([
        f"骰点原文: {result.roll_text()}",
        f"骰点结果: {result.result_text()}",
        f"总计: {result.value}",
    ])


def _read_inputs(args: argparse.Namespace) -> List[str]:
    if args.roll:
        return [" ".join(args.roll)]
    return [line for line in sys.stdin.read().split("\n") if line.strip()]


def _handle_shortcuts(args: argparse.Namespace, book: ShortcutBook) -> Optional[int]:
    """处理快捷骰管理参数, 已处理完毕时返回退出码"""
    if args.add_shortcut:
        name, roll = args.add_shortcut
        if not book.add(name, roll):
            print(f"错误: 快捷骰名称为空或已存在: {name!r}", file=sys.stderr)
            return 1
        if settings.shortcuts_file:
            book.save(settings.shortcuts_file)
        print(f"已保存快捷骰 {name}: {roll}")
        return 0

    if args.list_shortcuts:
        for shortcut in book:
            print(f"{shortcut.name}: {shortcut.roll}")
        return 0

    return None


def main(argv: Optional[List[str]] = None) -> int:
    """主函数, 返回退出码"""
    args = parse_args(argv)

    # 命令行 --debug 优先于配置
    log_level = "DEBUG" if args.debug else settings.log_level
    configure_logging(
        level=log_level,
        log_path=settings.log_path,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    book = ShortcutBook.load(settings.shortcuts_file) if settings.shortcuts_file else ShortcutBook()
    handled = _handle_shortcuts(args, book)
    if handled is not None:
        return handled

    if args.shortcut:
        shortcut = book.get(args.shortcut)
        if shortcut is None:
            print(f"错误: 快捷骰不存在: {args.shortcut}", file=sys.stderr)
            return 1
        inputs = [shortcut.roll]
    else:
        inputs = _read_inputs(args)

    # 未配置历史文件时只在内存中记录
    history = RollHistory.load(settings.history_file) if settings.history_file else RollHistory()

    exit_code = 0
    for text in inputs:
        entry = history.roll(text)
        if entry.ok:
            print(format_result(entry.result, verbose=args.verbose))
        else:
            print(f"错误: {entry.error}", file=sys.stderr)
            exit_code = 1

    if settings.history_file:
        history.save(settings.history_file)
        logger.debug(f"历史已保存: {settings.history_file} ({len(history)} 条)")

    return exit_code


def run() -> None:
    """控制台脚本入口"""
    sys.exit(main())


if __name__ == "__main__":
    run()
