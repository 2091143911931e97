"""图层数据模型单元测试."""

import pytest
from pydantic import ValidationError

from appshot.models.layer import (
    BackgroundLayer,
    ImageLayer,
    LayerType,
    MockupLayer,
    TextAlign,
    TextLayer,
    apply_layer_patch,
    parse_layer,
)
from appshot.utils.constants import (
    DEFAULT_IMAGE_GEOMETRY,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_CONTENT,
    DEFAULT_TEXT_FONT_SIZE,
    DEFAULT_TEXT_GEOMETRY,
)


# ===================
# 图层构造测试
# ===================


class TestTextLayer:
    """测试文字图层."""

    def test_should_create_with_editor_defaults(self):
        """应以编辑器默认值创建."""
        layer = TextLayer.create("layer-1")
        assert layer.type == LayerType.TEXT
        assert layer.content == DEFAULT_TEXT_CONTENT
        assert (layer.x, layer.y, layer.width, layer.height) == DEFAULT_TEXT_GEOMETRY
        assert layer.font_size == DEFAULT_TEXT_FONT_SIZE
        assert layer.color == DEFAULT_TEXT_COLOR
        assert layer.bold is False
        assert layer.align == TextAlign.LEFT

    def test_should_normalize_color(self):
        """颜色应规范化为大写十六进制."""
        layer = TextLayer(id="t", color="#abcdef")
        assert layer.color == "#ABCDEF"

    def test_should_reject_invalid_color(self):
        """无效颜色应校验失败."""
        with pytest.raises(ValidationError):
            TextLayer(id="t", color="nope")

    def test_should_reject_non_positive_font_size(self):
        """字号必须大于0."""
        with pytest.raises(ValidationError):
            TextLayer(id="t", font_size=0)

    def test_should_allow_negative_position(self):
        """位置允许为负数."""
        layer = TextLayer(id="t", x=-20, y=-5)
        assert layer.position == (-20, -5)

    def test_should_reject_unknown_fields(self):
        """不允许未知字段."""
        with pytest.raises(ValidationError):
            TextLayer(id="t", background_color="#FFFFFF")


class TestImageLayers:
    """测试图片类图层."""

    def test_should_create_image_with_default_geometry(self):
        """图片图层应使用默认几何."""
        layer = ImageLayer.create("layer-2", "data:image/png;base64,AAA")
        assert (layer.x, layer.y, layer.width, layer.height) == DEFAULT_IMAGE_GEOMETRY
        assert layer.has_image is True

    def test_empty_content_should_have_no_image(self):
        """内容为空时没有图片."""
        assert MockupLayer(id="mockup").has_image is False

    def test_background_should_normalize_color(self):
        """背景色应规范化."""
        layer = BackgroundLayer(id="bg", background_color="white")
        assert layer.background_color == "#FFFFFF"


# ===================
# 几何测试
# ===================


class TestGeometry:
    """测试图层几何."""

    def test_bounds(self):
        """边界框为 (left, top, right, bottom)."""
        layer = TextLayer(id="t", x=10, y=20, width=100, height=40)
        assert layer.bounds == (10, 20, 110, 60)

    def test_contains_should_include_edges(self):
        """边缘上的点属于图层."""
        layer = TextLayer(id="t", x=10, y=20, width=100, height=40)
        assert layer.contains(10, 20)
        assert layer.contains(110, 60)
        assert not layer.contains(111, 60)

    def test_should_reject_negative_size(self):
        """尺寸不能为负."""
        with pytest.raises(ValidationError):
            ImageLayer(id="i", width=-1)


# ===================
# 解析测试
# ===================


class TestParseLayer:
    """测试按类型解析图层."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"id": "a", "type": "text", "content": "Hi"}, TextLayer),
            ({"id": "b", "type": "image", "content": "x.png"}, ImageLayer),
            ({"id": "c", "type": "mockup"}, MockupLayer),
            ({"id": "d", "type": "background", "background_color": "#000"}, BackgroundLayer),
        ],
    )
    def test_should_dispatch_on_type(self, data, expected):
        """应根据 type 字段构造对应类型."""
        assert isinstance(parse_layer(data), expected)

    def test_should_reject_unknown_type(self):
        """未知类型应校验失败."""
        with pytest.raises(ValidationError):
            parse_layer({"id": "x", "type": "shape"})


# ===================
# 补丁测试
# ===================


class TestApplyLayerPatch:
    """测试图层补丁合并."""

    def test_should_only_change_given_fields(self):
        """只修改补丁中的字段."""
        layer = TextLayer(id="t", x=5, y=6, content="Hi", bold=False)
        updated = apply_layer_patch(layer, {"bold": True})
        assert updated.bold is True
        assert updated.content == "Hi"
        assert updated.position == (5, 6)

    def test_should_not_modify_original(self):
        """原图层保持不变."""
        layer = TextLayer(id="t")
        apply_layer_patch(layer, {"italic": True})
        assert layer.italic is False

    def test_should_ignore_foreign_and_immutable_fields(self):
        """忽略其他类型的字段以及 id/type."""
        layer = ImageLayer(id="i", content="a.png")
        updated = apply_layer_patch(layer, {"font_size": 40, "id": "other", "type": "text"})
        assert updated is layer

    def test_should_validate_values(self):
        """无效值应校验失败."""
        layer = TextLayer(id="t")
        with pytest.raises(ValidationError):
            apply_layer_patch(layer, {"color": "bogus"})

    def test_should_normalize_patched_color(self):
        """补丁中的颜色也应规范化."""
        layer = TextLayer(id="t")
        assert apply_layer_patch(layer, {"color": "#ff0000"}).color == "#FF0000"
