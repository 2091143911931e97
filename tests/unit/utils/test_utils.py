"""工具模块单元测试."""

import logging

import pytest

from appshot.utils.colors import color_to_rgba, normalize_color
from appshot.utils.exceptions import (
    AppException,
    CompositionError,
    CompositionLoadError,
    SnapshotFormatError,
    TemplateError,
    TemplateNotFoundError,
)
from appshot.utils.logger import (
    get_log_level,
    get_log_level_name,
    set_log_level,
    setup_logger,
)


# ===================
# 颜色工具测试
# ===================


class TestNormalizeColor:
    """测试颜色规范化."""

    def test_should_uppercase_hex(self):
        """十六进制颜色应转为大写."""
        assert normalize_color("#f0f4ff") == "#F0F4FF"

    def test_should_expand_short_hex(self):
        """三位十六进制应展开为六位."""
        assert normalize_color("#fff") == "#FFFFFF"

    def test_should_accept_color_names(self):
        """应支持颜色名称."""
        assert normalize_color("black") == "#000000"

    def test_should_keep_alpha_when_not_opaque(self):
        """半透明颜色应保留透明度."""
        assert normalize_color("#00000080") == "#00000080"

    def test_should_drop_opaque_alpha(self):
        """完全不透明时省略透明度."""
        assert normalize_color("#123456FF") == "#123456"

    @pytest.mark.parametrize("value", ["", "   ", "not-a-color", "#12"])
    def test_should_reject_invalid_color(self, value):
        """无效颜色应抛出 ValueError."""
        with pytest.raises(ValueError):
            normalize_color(value)


class TestColorToRgba:
    """测试颜色转 RGBA."""

    def test_should_add_opaque_alpha(self):
        """无透明度时补 255."""
        assert color_to_rgba("#FF0000") == (255, 0, 0, 255)

    def test_should_keep_alpha(self):
        """应保留透明度."""
        assert color_to_rgba("#00FF0080") == (0, 255, 0, 128)


# ===================
# 异常测试
# ===================


class TestExceptions:
    """测试异常层次."""

    def test_should_format_with_code(self):
        """字符串表示应包含错误代码."""
        error = AppException("出错了", "E1")
        assert str(error) == "[E1] 出错了"

    def test_template_not_found_should_keep_id(self):
        """模板未找到异常应保留模板ID."""
        error = TemplateNotFoundError("fancy")
        assert isinstance(error, TemplateError)
        assert error.template_id == "fancy"
        assert "fancy" in error.message

    def test_snapshot_format_error_is_composition_error(self):
        """快照格式错误属于作品错误."""
        error = SnapshotFormatError("缺少字段")
        assert isinstance(error, CompositionError)
        assert error.code == "SNAPSHOT_FORMAT_ERROR"

    def test_load_error_should_include_reason(self):
        """加载错误应包含路径和原因."""
        error = CompositionLoadError("/tmp/a.composition.json", "文件不存在")
        assert error.path == "/tmp/a.composition.json"
        assert "文件不存在" in error.message


# ===================
# 日志测试
# ===================


class TestLogger:
    """测试日志配置."""

    def test_should_return_child_logger(self):
        """应返回应用日志器的子日志器."""
        logger = setup_logger("appshot.tests")
        assert logger.name == "appshot.tests"

    def test_should_set_level_by_name(self):
        """应支持按名称设置日志级别."""
        original = get_log_level()
        try:
            set_log_level("DEBUG")
            assert get_log_level() == logging.DEBUG
            assert get_log_level_name() == "DEBUG"
        finally:
            set_log_level(original)
