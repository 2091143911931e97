"""屏幕数据模型.

一个屏幕对应一张导出的截图页面，由有序的图层栈组成（首个图层在最底层）。
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from appshot.models.layer import AnyLayer, LayerType
from appshot.utils.colors import normalize_color
from appshot.utils.constants import DEFAULT_SCREEN_BACKGROUND


class Screen(BaseModel):
    """屏幕.

    Attributes:
        id: 屏幕ID（在作品内唯一）
        name: 显示名称
        background_color: 背景色
        layers: 图层列表，顺序即绘制顺序

    Example:
        >>> screen = Screen(id="screen-1", name="Screen 1")
        >>> screen.layer_count
        0
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, description="屏幕ID")
    name: str = Field(default="", description="屏幕名称")
    background_color: str = Field(default=DEFAULT_SCREEN_BACKGROUND, description="背景色")
    layers: list[AnyLayer] = Field(default_factory=list, description="图层列表")

    @field_validator("background_color")
    @classmethod
    def validate_background_color(cls, v: str) -> str:
        """验证并规范化背景色."""
        return normalize_color(v)

    @model_validator(mode="after")
    def validate_unique_layer_ids(self) -> "Screen":
        """同一屏幕内图层ID必须唯一."""
        seen: set[str] = set()
        for layer in self.layers:
            if layer.id in seen:
                raise ValueError(f"屏幕 {self.id} 中存在重复的图层ID: {layer.id}")
            seen.add(layer.id)
        return self

    @property
    def layer_count(self) -> int:
        """图层数量."""
        return len(self.layers)

    @property
    def layer_ids(self) -> list[str]:
        """按绘制顺序排列的图层ID."""
        return [layer.id for layer in self.layers]

    def has_layer(self, layer_id: str) -> bool:
        """是否包含指定图层."""
        return self.index_of(layer_id) is not None

    def index_of(self, layer_id: str) -> Optional[int]:
        """获取图层在绘制顺序中的位置，不存在返回None."""
        for i, layer in enumerate(self.layers):
            if layer.id == layer_id:
                return i
        return None

    def get_layer(self, layer_id: str) -> Optional[AnyLayer]:
        """根据ID获取图层，不存在返回None."""
        index = self.index_of(layer_id)
        return self.layers[index] if index is not None else None

    def layer_at(self, x: float, y: float) -> Optional[AnyLayer]:
        """获取包含模型空间点的最上层图层.

        Args:
            x: 模型空间X坐标
            y: 模型空间Y坐标

        Returns:
            命中的图层，未命中返回None
        """
        for layer in reversed(self.layers):
            # 背景层视为画布本身，不参与命中
            if layer.type == LayerType.BACKGROUND:
                continue
            if layer.contains(x, y):
                return layer
        return None
