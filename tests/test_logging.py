"""日志配置与掷骰日志单元测试"""
import pytest
from loguru import logger

from fluorite.config import settings
from fluorite.dice import DiceSyntaxError, parse_input
from fluorite.logging import setup_logging
from fluorite.main import main


@pytest.fixture
def messages():
    captured = []
    handler_id = logger.add(captured.append, level="DEBUG", format="{message}")
    yield captured
    logger.remove(handler_id)


class TestLogRoll:
    """测试 log_roll 装饰器"""

    def test_success(self, messages):
        """成功时记录开始与结果"""
        parse_input("1+1")
        assert any("ROLL | expr='1+1'" in m for m in messages)
        assert any("ROLL_OK | value=2 | rolls=0" in m for m in messages)

    def test_input_error(self, messages):
        """输入错误记录为 ROLL_ERR 并重新抛出"""
        with pytest.raises(DiceSyntaxError):
            parse_input("2+")
        assert any("ROLL_ERR" in m and "DiceSyntaxError" in m for m in messages)
        assert not any("ROLL_BUG" in m for m in messages)


class TestSetupLogging:
    """测试日志配置"""

    def test_console_level(self, capsys):
        """stderr 只输出不低于指定级别的日志"""
        setup_logging(level="info")
        logger.debug("hidden line")
        logger.info("shown line")
        err = capsys.readouterr().err
        assert "shown line" in err
        assert "hidden line" not in err

    def test_file_sink_keeps_debug(self, tmp_path, capsys):
        """日志文件记录 DEBUG, 不受控制台级别影响"""
        log_dir = tmp_path / "logs"
        setup_logging(level="ERROR", log_path=log_dir, rotation="1 MB", retention="1 day")
        logger.debug("to file only")
        logger.remove()
        (log_file,) = log_dir.glob("fluorite_*.log")
        assert "to file only" in log_file.read_text(encoding="utf-8")
        assert "to file only" not in capsys.readouterr().err

    def test_cli_uses_settings(self, tmp_path, monkeypatch, capsys):
        """命令行按配置写日志文件"""
        log_dir = tmp_path / "logs"
        monkeypatch.setattr(settings, "log_path", log_dir)
        monkeypatch.setattr(settings, "log_rotation", "1 MB")
        assert main(["1+1"]) == 0
        logger.remove()
        (log_file,) = log_dir.glob("fluorite_*.log")
        assert "ROLL_OK | value=2" in log_file.read_text(encoding="utf-8")
        assert capsys.readouterr().out.strip() == "2"
