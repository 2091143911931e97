"""作品快照模型.

作品（Composition）的纯数据形式，用于持久化、导出和撤销/重做。
不包含任何函数或循环引用，可直接序列化为 JSON。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from appshot.models.screen import Screen
from appshot.utils.exceptions import SnapshotFormatError

SNAPSHOT_VERSION = "1.0"


class CompositionSnapshot(BaseModel):
    """作品快照.

    Attributes:
        screens: 有序屏幕列表（至少一个）
        active_screen_id: 当前活动屏幕ID
        selected_layer_id: 当前选中的图层ID（位于活动屏幕内）
        version: 快照格式版本

    Example:
        >>> snapshot = CompositionSnapshot(
        ...     screens=[Screen(id="screen-1", name="Screen 1")],
        ...     active_screen_id="screen-1",
        ... )
        >>> CompositionSnapshot.from_json(snapshot.to_json()) == snapshot
        True
    """

    model_config = ConfigDict(extra="forbid")

    screens: list[Screen] = Field(min_length=1, description="屏幕列表")
    active_screen_id: str = Field(description="活动屏幕ID")
    selected_layer_id: Optional[str] = Field(default=None, description="选中图层ID")
    version: str = Field(default=SNAPSHOT_VERSION, description="快照版本")

    @model_validator(mode="after")
    def validate_references(self) -> "CompositionSnapshot":
        """校验屏幕ID唯一以及活动屏幕、选中图层的引用."""
        screen_ids = [screen.id for screen in self.screens]
        if len(set(screen_ids)) != len(screen_ids):
            raise ValueError("屏幕ID必须唯一")

        active = self.get_screen(self.active_screen_id)
        if active is None:
            raise ValueError(f"活动屏幕不存在: {self.active_screen_id}")

        if self.selected_layer_id is not None and not active.has_layer(
            self.selected_layer_id
        ):
            raise ValueError(f"选中图层不在活动屏幕中: {self.selected_layer_id}")
        return self

    def get_screen(self, screen_id: str) -> Optional[Screen]:
        """根据ID获取屏幕."""
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None

    # ========================
    # 序列化
    # ========================

    def to_dict(self) -> dict[str, Any]:
        """转换为纯字典（枚举转为字符串）."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompositionSnapshot":
        """从字典构造快照.

        Raises:
            SnapshotFormatError: 字段缺失或无效
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotFormatError(str(e)) from e

    def to_json(self, indent: int = 2) -> str:
        """序列化为JSON字符串.

        Args:
            indent: 缩进空格数

        Returns:
            JSON字符串
        """
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "CompositionSnapshot":
        """从JSON字符串反序列化.

        Raises:
            SnapshotFormatError: JSON无效或字段无效
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"JSON解析失败: {e}") from e
        if not isinstance(data, dict):
            raise SnapshotFormatError("顶层必须是对象")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "CompositionSnapshot":
        """从文件加载快照."""
        with open(file_path, "r", encoding="utf-8") as f:
            return cls.from_json(f.read())

    def save_to_file(self, file_path: Union[str, Path]) -> None:
        """保存快照到文件."""
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.to_json())
