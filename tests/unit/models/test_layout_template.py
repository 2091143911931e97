"""版式模板数据模型单元测试."""

import pytest
from pydantic import ValidationError

from appshot.models.layout_template import (
    LayoutContent,
    LayoutTemplate,
    SlotRect,
    TextSlot,
)


def _template(**overrides) -> LayoutTemplate:
    data = dict(
        id="t",
        name="T",
        background_color="#fff",
        text_color="#111",
        mockup=SlotRect(x=0, y=0, width=10, height=10),
        title=TextSlot(x=0, y=0, width=10, height=10, font_size=30),
        subtitle=TextSlot(x=0, y=20, width=10, height=10, font_size=14),
    )
    data.update(overrides)
    return LayoutTemplate(**data)


class TestLayoutTemplate:
    """测试版式模板."""

    def test_should_normalize_colors(self):
        """颜色应规范化."""
        template = _template()
        assert template.background_color == "#FFFFFF"
        assert template.text_color == "#111111"

    def test_should_be_immutable(self):
        """模板不可修改."""
        template = _template()
        with pytest.raises(ValidationError):
            template.name = "changed"

    def test_logo_is_optional(self):
        """Logo 位置可选."""
        assert _template().logo is None


class TestLayoutContent:
    """测试版式内容."""

    def test_empty_text_color_means_template_default(self):
        """空文字颜色视为未设置."""
        content = LayoutContent(screenshot="a.png", headline="Hi", text_color="")
        assert content.text_color is None

    def test_should_normalize_text_color(self):
        """文字颜色应规范化."""
        content = LayoutContent(screenshot="a.png", headline="Hi", text_color="red")
        assert content.text_color == "#FF0000"

    def test_headline_is_required(self):
        """标题必填."""
        with pytest.raises(ValidationError):
            LayoutContent(screenshot="a.png")
