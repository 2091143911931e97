"""颜色工具.

基于 Pillow 的 ImageColor 解析 CSS 颜色字符串，统一规范为十六进制格式。
"""

from __future__ import annotations

from PIL import ImageColor


def normalize_color(value: str) -> str:
    """将颜色字符串规范化为大写十六进制.

    支持 ``#RGB``、``#RRGGBB``、``#RRGGBBAA``、``rgb()`` 以及颜色名称。

    Args:
        value: 颜色字符串

    Returns:
        ``#RRGGBB``，带透明度时为 ``#RRGGBBAA``

    Raises:
        ValueError: 无法解析的颜色值

    Example:
        >>> normalize_color("#f0f4ff")
        '#F0F4FF'
        >>> normalize_color("white")
        '#FFFFFF'
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"颜色值必须是非空字符串，实际: {value!r}")

    try:
        rgb = ImageColor.getrgb(value.strip())
    except ValueError as e:
        raise ValueError(f"无法解析的颜色值: {value!r}") from e

    if len(rgb) == 4 and rgb[3] != 255:
        return "#{:02X}{:02X}{:02X}{:02X}".format(*rgb)
    return "#{:02X}{:02X}{:02X}".format(*rgb[:3])


def color_to_rgba(value: str) -> tuple[int, int, int, int]:
    """将颜色字符串转换为 RGBA 元组."""
    rgb = ImageColor.getrgb(value)
    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return rgb  # type: ignore[return-value]
