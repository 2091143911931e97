"""版式模板数据模型.

模板定义背景色、文字色以及设备外框、标题、副标题、Logo 的几何位置。
ScreenConfig 是按屏幕序号交替选用的几何预设。
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appshot.models.layer import TextAlign
from appshot.utils.colors import normalize_color


class TemplateCategory(str, Enum):
    """模板风格分类."""

    MINIMAL = "minimal"
    BOLD = "bold"
    ELEGANT = "elegant"
    PLAYFUL = "playful"
    DARK = "dark"
    MODERN = "modern"


class SlotRect(BaseModel):
    """矩形槽位."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class TextSlot(SlotRect):
    """文字槽位（矩形 + 字号 + 对齐）."""

    font_size: float = Field(gt=0)
    align: TextAlign = TextAlign.LEFT


class LogoSlot(BaseModel):
    """Logo 槽位（正方形）."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: float
    y: float
    size: float = Field(ge=0)


class ScreenConfig(BaseModel):
    """单屏几何预设.

    Attributes:
        mockup: 设备外框位置
        title: 标题位置
        subtitle: 副标题位置
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mockup: SlotRect
    title: TextSlot
    subtitle: TextSlot


class LayoutTemplate(BaseModel):
    """版式模板.

    Attributes:
        id: 模板ID
        name: 模板名称
        category: 风格分类
        background_color: 背景色
        text_color: 默认文字颜色
        mockup: 基础设备外框位置
        title: 基础标题位置
        subtitle: 基础副标题位置
        logo: 可选 Logo 位置
        preview: 简短描述
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    name: str
    category: TemplateCategory = TemplateCategory.MINIMAL
    background_color: str
    text_color: str
    mockup: SlotRect
    title: TextSlot
    subtitle: TextSlot
    logo: Optional[LogoSlot] = None
    preview: str = ""

    @field_validator("background_color", "text_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """验证并规范化颜色."""
        return normalize_color(v)


class LayoutContent(BaseModel):
    """生成版式所需的内容（通常由 AI 分析得到）.

    截图与 Logo 为不透明的图片引用，这里不校验格式和大小。
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    screenshot: str
    headline: str
    subtitle: Optional[str] = None
    logo: Optional[str] = None
    text_color: Optional[str] = None
    font_family: Optional[str] = None

    @field_validator("text_color")
    @classmethod
    def validate_text_color(cls, v: Optional[str]) -> Optional[str]:
        """验证并规范化文字颜色."""
        return normalize_color(v) if v else None
