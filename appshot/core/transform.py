"""坐标变换.

在两个坐标空间之间转换:

- 视口空间: 指针事件坐标（像素），包含平移偏移
- 模型空间: 图层几何所用的逻辑单位，与缩放无关

正向（渲染）: ``viewport = model * zoom + pan``
逆向（拖放）: ``model = (viewport - pan) / zoom``
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from appshot.models.layer import LayerBase, Point, Rect
from appshot.utils.constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP


@dataclass(frozen=True)
class ViewportState:
    """视口状态（瞬态，不随作品持久化）.

    Attributes:
        zoom: 缩放比例，始终位于 [MIN_ZOOM, MAX_ZOOM]
        pan_offset: 平移偏移（视口像素）
    """

    zoom: float = DEFAULT_ZOOM
    pan_offset: Point = (0.0, 0.0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "zoom", clamp_zoom(self.zoom))


# ===================
# 缩放
# ===================


def clamp_zoom(zoom: float) -> float:
    """将缩放比例限制在允许范围内."""
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def set_zoom(viewport: ViewportState, zoom: float) -> ViewportState:
    """设置缩放比例（越界时静默截断），平移保持不变."""
    return replace(viewport, zoom=clamp_zoom(zoom))


def zoom_in(viewport: ViewportState) -> ViewportState:
    """放大一级."""
    return set_zoom(viewport, viewport.zoom + ZOOM_STEP)


def zoom_out(viewport: ViewportState) -> ViewportState:
    """缩小一级."""
    return set_zoom(viewport, viewport.zoom - ZOOM_STEP)


def reset_view() -> ViewportState:
    """同时重置缩放为 1.0、平移为 (0, 0)."""
    return ViewportState(zoom=DEFAULT_ZOOM, pan_offset=(0.0, 0.0))


# ===================
# 坐标转换
# ===================


def model_to_viewport(point: Point, viewport: ViewportState) -> Point:
    """模型空间 -> 视口空间."""
    return (
        point[0] * viewport.zoom + viewport.pan_offset[0],
        point[1] * viewport.zoom + viewport.pan_offset[1],
    )


def viewport_to_model(point: Point, viewport: ViewportState) -> Point:
    """视口空间 -> 模型空间."""
    return (
        (point[0] - viewport.pan_offset[0]) / viewport.zoom,
        (point[1] - viewport.pan_offset[1]) / viewport.zoom,
    )


def model_rect_to_viewport(layer: LayerBase, viewport: ViewportState) -> Rect:
    """获取图层在视口中的矩形.

    Returns:
        (x, y, width, height)，位置与尺寸均按缩放比例换算
    """
    x, y = model_to_viewport(layer.position, viewport)
    return (x, y, layer.width * viewport.zoom, layer.height * viewport.zoom)


# ===================
# 拖动与平移
# ===================


def drag_anchor(pointer: Point, layer_position: Point, zoom: float) -> Point:
    """计算拖动起点锚.

    锚 = 指针位置 - 图层位置（换算为视口单位，不含平移）。
    在整个拖动过程中保持不变。

    Args:
        pointer: 按下时的指针位置（视口）
        layer_position: 图层模型空间位置
        zoom: 当前缩放比例

    Returns:
        视口空间中的固定偏移
    """
    return (
        pointer[0] - layer_position[0] * zoom,
        pointer[1] - layer_position[1] * zoom,
    )


def drag_position(pointer: Point, anchor: Point, zoom: float) -> Point:
    """根据当前指针位置计算图层新的模型空间位置.

    必须先减去锚再除以缩放比例，顺序颠倒会在 zoom != 1 时产生漂移。
    """
    return (
        (pointer[0] - anchor[0]) / zoom,
        (pointer[1] - anchor[1]) / zoom,
    )


def pan_anchor(pointer: Point, pan_offset: Point) -> Point:
    """计算平移起点锚（视口空间）."""
    return (pointer[0] - pan_offset[0], pointer[1] - pan_offset[1])


def pan_position(pointer: Point, anchor: Point) -> Point:
    """根据当前指针位置计算新的平移偏移，全程在视口空间计算."""
    return (pointer[0] - anchor[0], pointer[1] - anchor[1])
