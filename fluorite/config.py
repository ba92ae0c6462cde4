"""配置管理模块"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置, 从环境变量和 .env 读取"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # 日志配置
    log_level: str = "WARNING"
    log_path: Optional[Path] = None  # 为空时不写日志文件
    log_rotation: str = "5 MB"
    log_retention: str = "14 days"

    # 计算配置
    decimal_precision: int = Field(28, ge=1)  # 十进制运算有效位数
    max_dice: int = Field(10000, ge=1)  # 单个骰点项最多骰子数

    # 历史与快捷骰
    max_history_entries: int = Field(100, ge=0)
    history_file: Optional[Path] = None
    shortcuts_file: Optional[Path] = None


settings = Settings()
