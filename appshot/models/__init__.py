"""数据模型模块."""

from appshot.models.composition import CompositionSnapshot
from appshot.models.layer import (
    # 枚举
    LayerType,
    TextAlign,
    # 图层类
    LayerBase,
    TextLayer,
    ImageLayer,
    MockupLayer,
    BackgroundLayer,
    AnyLayer,
    # 辅助函数
    parse_layer,
    apply_layer_patch,
)
from appshot.models.layout_template import (
    LayoutContent,
    LayoutTemplate,
    LogoSlot,
    ScreenConfig,
    SlotRect,
    TemplateCategory,
    TextSlot,
)
from appshot.models.screen import Screen

__all__ = [
    # 枚举
    "LayerType",
    "TextAlign",
    "TemplateCategory",
    # 图层类
    "LayerBase",
    "TextLayer",
    "ImageLayer",
    "MockupLayer",
    "BackgroundLayer",
    "AnyLayer",
    # 屏幕与作品
    "Screen",
    "CompositionSnapshot",
    # 模板
    "LayoutContent",
    "LayoutTemplate",
    "LogoSlot",
    "ScreenConfig",
    "SlotRect",
    "TextSlot",
    # 辅助函数
    "parse_layer",
    "apply_layer_patch",
]
