"""图层数据模型.

图层是屏幕上的一个可定位视觉元素。四种图层以 ``type`` 字段区分，
组成 pydantic 判别联合类型，每种图层只携带自身的字段。

Features:
    - 文字、图片、设备外框（mockup）、背景四种图层
    - 判别联合解析（``parse_layer``）
    - 合并式补丁更新（``apply_layer_patch``）
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from appshot.utils.colors import normalize_color
from appshot.utils.constants import (
    DEFAULT_IMAGE_GEOMETRY,
    DEFAULT_SCREEN_BACKGROUND,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_CONTENT,
    DEFAULT_TEXT_FONT_SIZE,
    DEFAULT_TEXT_GEOMETRY,
)

Point = tuple[float, float]
Rect = tuple[float, float, float, float]


# ===================
# 枚举定义
# ===================


class LayerType(str, Enum):
    """图层类型枚举."""

    TEXT = "text"
    IMAGE = "image"
    MOCKUP = "mockup"  # 设备外框，内嵌截图
    BACKGROUND = "background"


class TextAlign(str, Enum):
    """文字对齐方式."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# 补丁更新时不可修改的字段
IMMUTABLE_LAYER_FIELDS = frozenset({"id", "type"})


# ===================
# 图层基类
# ===================


class LayerBase(BaseModel):
    """图层公共属性.

    坐标使用模型空间单位，与缩放和平移无关。x/y 允许为负数，
    以便把图层暂放在画布之外。

    Attributes:
        id: 图层ID（在所属屏幕内唯一）
        type: 图层类型
        x: 左上角X坐标
        y: 左上角Y坐标
        width: 宽度
        height: 高度
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, description="图层ID")
    type: LayerType = Field(description="图层类型")

    x: float = Field(default=0.0, description="X坐标")
    y: float = Field(default=0.0, description="Y坐标")
    width: float = Field(default=100.0, ge=0, description="宽度")
    height: float = Field(default=100.0, ge=0, description="高度")

    @property
    def position(self) -> Point:
        """左上角位置."""
        return (self.x, self.y)

    @property
    def bounds(self) -> Rect:
        """获取边界框.

        Returns:
            (left, top, right, bottom) 边界元组
        """
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def contains(self, x: float, y: float) -> bool:
        """判断模型空间中的点是否落在图层矩形内."""
        left, top, right, bottom = self.bounds
        return left <= x <= right and top <= y <= bottom


# ===================
# 文字图层
# ===================


class TextLayer(LayerBase):
    """文字图层.

    Attributes:
        content: 文字内容
        font_size: 字体大小
        font_family: 字体（None 表示使用渲染端默认字体）
        color: 文字颜色
        bold: 粗体
        italic: 斜体
        underline: 下划线
        align: 对齐方式

    Example:
        >>> layer = TextLayer(id="headline", content="Track Spend", bold=True)
        >>> layer.type
        <LayerType.TEXT: 'text'>
    """

    type: Literal[LayerType.TEXT] = Field(default=LayerType.TEXT, description="图层类型")

    content: str = Field(default=DEFAULT_TEXT_CONTENT, description="文字内容")
    font_size: float = Field(default=DEFAULT_TEXT_FONT_SIZE, gt=0, description="字体大小")
    font_family: Optional[str] = Field(default=None, description="字体")
    color: str = Field(default=DEFAULT_TEXT_COLOR, description="文字颜色")

    bold: bool = Field(default=False, description="粗体")
    italic: bool = Field(default=False, description="斜体")
    underline: bool = Field(default=False, description="下划线")
    align: TextAlign = Field(default=TextAlign.LEFT, description="对齐方式")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """验证并规范化颜色."""
        return normalize_color(v)

    @classmethod
    def create(cls, layer_id: str) -> "TextLayer":
        """以编辑器默认几何与样式创建文字图层.

        Args:
            layer_id: 图层ID

        Returns:
            TextLayer实例
        """
        x, y, width, height = DEFAULT_TEXT_GEOMETRY
        return cls(id=layer_id, x=x, y=y, width=width, height=height)


# ===================
# 图片类图层
# ===================


class ImageLayer(LayerBase):
    """图片图层.

    ``content`` 为不透明的图片引用（URL 或 data URL），不做格式校验。
    """

    type: Literal[LayerType.IMAGE] = Field(default=LayerType.IMAGE, description="图层类型")
    content: str = Field(default="", description="图片引用")

    @property
    def has_image(self) -> bool:
        """是否已设置图片."""
        return bool(self.content)

    @classmethod
    def create(cls, layer_id: str, content: str) -> "ImageLayer":
        """以编辑器默认几何创建图片图层."""
        x, y, width, height = DEFAULT_IMAGE_GEOMETRY
        return cls(id=layer_id, content=content, x=x, y=y, width=width, height=height)


class MockupLayer(LayerBase):
    """设备外框图层，``content`` 为放入外框内的截图引用."""

    type: Literal[LayerType.MOCKUP] = Field(default=LayerType.MOCKUP, description="图层类型")
    content: str = Field(default="", description="截图引用")

    @property
    def has_image(self) -> bool:
        """是否已设置截图."""
        return bool(self.content)


# ===================
# 背景图层
# ===================


class BackgroundLayer(LayerBase):
    """纯色背景图层."""

    type: Literal[LayerType.BACKGROUND] = Field(
        default=LayerType.BACKGROUND, description="图层类型"
    )
    background_color: str = Field(default=DEFAULT_SCREEN_BACKGROUND, description="背景色")

    @field_validator("background_color")
    @classmethod
    def validate_background_color(cls, v: str) -> str:
        """验证并规范化背景色."""
        return normalize_color(v)


# ===================
# 联合类型
# ===================

AnyLayer = Annotated[
    Union[TextLayer, ImageLayer, MockupLayer, BackgroundLayer],
    Field(discriminator="type"),
]

_layer_adapter: TypeAdapter[AnyLayer] = TypeAdapter(AnyLayer)


def parse_layer(data: Mapping[str, Any]) -> AnyLayer:
    """根据 ``type`` 字段构造对应的图层对象.

    Args:
        data: 图层字典数据

    Returns:
        图层对象

    Raises:
        pydantic.ValidationError: 类型未知或字段无效
    """
    return _layer_adapter.validate_python(dict(data))


def apply_layer_patch(layer: AnyLayer, patch: Mapping[str, Any]) -> AnyLayer:
    """以合并语义更新图层，返回新的图层对象.

    只修改补丁中出现且属于该图层类型的字段，其余字段（包括几何）保持不变。
    不属于该类型的键会被忽略，``id`` 与 ``type`` 不可修改。

    Args:
        layer: 原图层
        patch: 部分字段

    Returns:
        更新后的图层；补丁无有效字段时返回原对象

    Raises:
        pydantic.ValidationError: 字段值无效
    """
    allowed = set(type(layer).model_fields) - IMMUTABLE_LAYER_FIELDS
    updates = {key: value for key, value in patch.items() if key in allowed}
    if not updates:
        return layer

    data = layer.model_dump()
    data.update(updates)
    return type(layer).model_validate(data)
