"""应用设置模型."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from appshot.utils.constants import (
    COMPOSITIONS_DIR,
    DEFAULT_HISTORY_DEPTH,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
)


class Settings(BaseSettings):
    """应用设置.

    支持从 ``APPSHOT_`` 前缀的环境变量和 .env 文件加载配置。

    Attributes:
        log_level: 日志级别
        debug: 调试模式
        default_template_id: 默认版式模板
        history_depth: 撤销栈最大深度
        compositions_dir: 作品保存目录
        canvas_width: 编辑器中单屏宽度
        canvas_height: 编辑器中单屏高度
    """

    model_config = SettingsConfigDict(
        env_prefix="APPSHOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="日志级别")
    debug: bool = Field(default=False, description="调试模式")

    default_template_id: str = Field(default="default", description="默认版式模板")

    history_depth: int = Field(
        default=DEFAULT_HISTORY_DEPTH,
        ge=1,
        le=500,
        description="撤销栈最大深度",
    )

    compositions_dir: Optional[Path] = Field(
        default=None,
        description="作品保存目录",
    )

    canvas_width: int = Field(default=SCREEN_WIDTH, ge=100, le=4096, description="单屏宽度")
    canvas_height: int = Field(default=SCREEN_HEIGHT, ge=100, le=4096, description="单屏高度")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"无效的日志级别: {v}，有效值: {valid_levels}")
        return upper_v

    @property
    def storage_dir(self) -> Path:
        """获取作品保存目录."""
        return self.compositions_dir or COMPOSITIONS_DIR

    @property
    def canvas_size(self) -> tuple[int, int]:
        """获取单屏尺寸."""
        return (self.canvas_width, self.canvas_height)
