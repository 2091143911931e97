"""版式生成服务.

根据版式模板、内容和屏幕序号确定性地生成一个屏幕的初始图层列表。
相邻屏幕交替使用两套几何预设，使多屏导出时设备外框的位置上下交替，
无需逐屏手动配置。

Features:
    - 纯函数式图层生成（相同输入得到结构相同的结果）
    - 按屏幕序号交替的几何预设（可传入更多预设）
    - 内置模板注册表
    - 一次性为多屏作品播种
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from appshot.core.composition_store import CompositionStore
from appshot.models.layer import (
    AnyLayer,
    BackgroundLayer,
    ImageLayer,
    MockupLayer,
    TextAlign,
    TextLayer,
)
from appshot.models.layout_template import (
    LayoutContent,
    LayoutTemplate,
    ScreenConfig,
    SlotRect,
    TemplateCategory,
    TextSlot,
)
from appshot.models.screen import Screen
from appshot.utils.constants import (
    CANONICAL_CANVAS_HEIGHT,
    CANONICAL_CANVAS_WIDTH,
    DEFAULT_FONT_FAMILY,
    SCREEN_NAME_FORMAT,
)
from appshot.utils.exceptions import TemplateNotFoundError
from appshot.utils.logger import setup_logger

logger = setup_logger(__name__)


# ===================
# 图层ID（固定方案）
# ===================

BACKGROUND_LAYER_ID = "bg"
MOCKUP_LAYER_ID = "mockup"
HEADLINE_LAYER_ID = "headline"
SUBTITLE_LAYER_ID = "subtitle"
LOGO_LAYER_ID = "logo"


# ===================
# 几何预设
# ===================

SCREEN_CONFIGS: tuple[ScreenConfig, ...] = (
    # A: 文字在上，设备外框在下
    ScreenConfig(
        mockup=SlotRect(x=34, y=245, width=307, height=622),
        title=TextSlot(x=26, y=45, width=300, height=50, font_size=34, align=TextAlign.LEFT),
        subtitle=TextSlot(x=26, y=96, width=340, height=20, font_size=16, align=TextAlign.LEFT),
    ),
    # B: 设备外框在上（部分超出顶部），文字在下
    ScreenConfig(
        mockup=SlotRect(x=34, y=-66, width=307, height=622),
        title=TextSlot(x=26, y=612, width=300, height=50, font_size=34, align=TextAlign.LEFT),
        subtitle=TextSlot(x=26, y=666, width=340, height=20, font_size=16, align=TextAlign.LEFT),
    ),
)


# ===================
# 内置模板
# ===================

LAYOUT_TEMPLATES: tuple[LayoutTemplate, ...] = (
    LayoutTemplate(
        id="default",
        name="Default",
        category=TemplateCategory.MINIMAL,
        background_color="#F5F5F5",
        text_color="#1A1A1A",
        mockup=SlotRect(x=468, y=245, width=307, height=622),
        title=TextSlot(x=26, y=45, width=300, height=50, font_size=34, align=TextAlign.LEFT),
        subtitle=TextSlot(x=26, y=100, width=340, height=20, font_size=16, align=TextAlign.LEFT),
        preview="Default app store layout",
    ),
)


def get_template_by_id(template_id: str) -> Optional[LayoutTemplate]:
    """根据ID获取内置模板，不存在返回None."""
    for template in LAYOUT_TEMPLATES:
        if template.id == template_id:
            return template
    return None


def require_template(template_id: str) -> LayoutTemplate:
    """根据ID获取内置模板.

    Raises:
        TemplateNotFoundError: 模板不存在
    """
    template = get_template_by_id(template_id)
    if template is None:
        raise TemplateNotFoundError(template_id)
    return template


def get_screen_config(
    screen_index: int, configs: Sequence[ScreenConfig] = SCREEN_CONFIGS
) -> ScreenConfig:
    """按屏幕序号选择几何预设.

    Args:
        screen_index: 屏幕序号（从0开始）
        configs: 交替使用的预设，默认两套

    Returns:
        ``configs[screen_index % len(configs)]``

    Raises:
        ValueError: 序号为负或预设为空
    """
    if screen_index < 0:
        raise ValueError(f"屏幕序号不能为负数: {screen_index}")
    if not configs:
        raise ValueError("至少需要一套几何预设")
    return configs[screen_index % len(configs)]


# ===================
# 图层生成
# ===================


def generate_layers(
    template: LayoutTemplate,
    content: LayoutContent,
    screen_index: int = 0,
    configs: Sequence[ScreenConfig] = SCREEN_CONFIGS,
) -> list[AnyLayer]:
    """根据模板生成一个屏幕的图层列表.

    生成顺序固定为: 背景、设备外框、标题，可选的副标题和 Logo。
    副标题仅在内容提供时生成；Logo 仅在内容提供且模板定义了 Logo 位置时生成。

    Args:
        template: 版式模板
        content: 内容（截图、标题等）
        screen_index: 屏幕序号，决定使用哪套几何预设
        configs: 交替使用的几何预设

    Returns:
        按绘制顺序排列的图层列表

    Example:
        >>> template = require_template("default")
        >>> content = LayoutContent(screenshot="s.png", headline="Track Spend")
        >>> [layer.id for layer in generate_layers(template, content, 0)]
        ['bg', 'mockup', 'headline']
    """
    config = get_screen_config(screen_index, configs)
    text_color = content.text_color or template.text_color
    font_family = content.font_family or DEFAULT_FONT_FAMILY

    layers: list[AnyLayer] = [
        BackgroundLayer(
            id=BACKGROUND_LAYER_ID,
            x=0,
            y=0,
            width=CANONICAL_CANVAS_WIDTH,
            height=CANONICAL_CANVAS_HEIGHT,
            background_color=template.background_color,
        ),
        MockupLayer(
            id=MOCKUP_LAYER_ID,
            content=content.screenshot,
            x=config.mockup.x,
            y=config.mockup.y,
            width=config.mockup.width,
            height=config.mockup.height,
        ),
        _text_layer(
            HEADLINE_LAYER_ID, content.headline, config.title, text_color, font_family, bold=True
        ),
    ]

    if content.subtitle:
        layers.append(
            _text_layer(
                SUBTITLE_LAYER_ID,
                content.subtitle,
                config.subtitle,
                text_color,
                font_family,
                bold=False,
            )
        )

    if content.logo and template.logo is not None:
        logo = template.logo
        layers.append(
            ImageLayer(
                id=LOGO_LAYER_ID,
                content=content.logo,
                x=logo.x,
                y=logo.y,
                width=logo.size,
                height=logo.size,
            )
        )

    return layers


def _text_layer(
    layer_id: str,
    text: str,
    slot: TextSlot,
    color: str,
    font_family: str,
    bold: bool,
) -> TextLayer:
    return TextLayer(
        id=layer_id,
        content=text,
        x=slot.x,
        y=slot.y,
        width=slot.width,
        height=slot.height,
        font_size=slot.font_size,
        font_family=font_family,
        color=color,
        bold=bold,
        align=slot.align,
    )


def generate_screen(
    template: LayoutTemplate,
    content: LayoutContent,
    screen_index: int,
    screen_id: str,
    configs: Sequence[ScreenConfig] = SCREEN_CONFIGS,
) -> Screen:
    """生成完整的屏幕对象（名称为 "Screen N"，背景色取模板背景色）."""
    return Screen(
        id=screen_id,
        name=SCREEN_NAME_FORMAT.format(index=screen_index + 1),
        background_color=template.background_color,
        layers=generate_layers(template, content, screen_index, configs),
    )


def seed_composition(
    template: LayoutTemplate,
    contents: Iterable[LayoutContent],
    configs: Sequence[ScreenConfig] = SCREEN_CONFIGS,
) -> CompositionStore:
    """为每份内容生成一个屏幕，组成新的作品仓库.

    Args:
        template: 版式模板
        contents: 每个屏幕的内容，至少一份
        configs: 交替使用的几何预设

    Returns:
        作品仓库，第一个屏幕为活动屏幕

    Raises:
        ValueError: 未提供任何内容
    """
    screens = [
        generate_screen(template, content, index, f"screen-{index + 1}", configs)
        for index, content in enumerate(contents)
    ]
    if not screens:
        raise ValueError("至少需要一份屏幕内容")

    logger.info(f"使用模板 '{template.id}' 生成 {len(screens)} 个屏幕")
    return CompositionStore(screens=screens, active_screen_id=screens[0].id)
