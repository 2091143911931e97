"""设计画布视图单元测试."""

from unittest.mock import MagicMock

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPainter
from PyQt6.QtTest import QTest

from appshot.core.composition_store import CompositionStore
from appshot.models.layer import TextLayer
from appshot.models.screen import Screen
from appshot.ui.design_canvas import DesignCanvasView, screen_offset
from appshot.utils.constants import SCREEN_GAP, SCREEN_WIDTH


@pytest.fixture
def store() -> CompositionStore:
    """两个屏幕、各有一个文字图层的仓库."""
    return CompositionStore(
        screens=[
            Screen(
                id="screen-1",
                layers=[TextLayer(id="title", x=100, y=250, width=200, height=40)],
            ),
            Screen(
                id="screen-2",
                layers=[TextLayer(id="caption", x=20, y=20, width=100, height=30)],
            ),
        ]
    )


@pytest.fixture
def view(app, qtbot, store) -> DesignCanvasView:
    """画布视图."""
    widget = DesignCanvasView(store, user_prompt="记账应用截图")
    qtbot.addWidget(widget)
    return widget


def _second_screen_x(x: float, zoom: float = 1.0) -> float:
    return screen_offset(1, zoom) + x * zoom


# ===================
# 布局测试
# ===================


class TestLayout:
    """测试屏幕排列."""

    def test_screen_offset(self):
        """屏幕横向排列，间隔固定."""
        assert screen_offset(0, 1.0) == 0
        assert screen_offset(2, 0.5) == 2 * (SCREEN_WIDTH * 0.5 + SCREEN_GAP)

    def test_locate_screen(self, view):
        """查找坐标所在屏幕."""
        assert view.locate_screen((10.0, 10.0)) == ("screen-1", (10.0, 10.0))
        screen_id, local = view.locate_screen((_second_screen_x(10.0), 10.0))
        assert screen_id == "screen-2"
        assert local == pytest.approx((10.0, 10.0))

    def test_gap_is_outside_screens(self, view):
        """屏幕间隙不属于任何屏幕."""
        assert view.locate_screen((SCREEN_WIDTH + SCREEN_GAP / 2, 10.0)) is None

    def test_prompt_is_shown(self, view):
        """显示用户提示词."""
        assert view.user_prompt == "记账应用截图"
        assert view._prompt_label.text() == "记账应用截图"


# ===================
# 指针交互测试
# ===================


class TestPointer:
    """测试指针交互."""

    def test_drag_layer(self, view, store):
        """拖动图层."""
        view.pointer_down((110.0, 260.0))
        view.pointer_move((160.0, 280.0))
        view.pointer_up()
        assert store.get_layer("title").position == (150.0, 270.0)
        assert store.selected_layer_id == "title"

    def test_press_on_second_screen_switches_screen(self, view, store):
        """在第二屏的图层上按下切换活动屏幕."""
        view.pointer_down((_second_screen_x(30.0), 30.0))
        view.pointer_up()
        assert store.active_screen_id == "screen-2"
        assert store.selected_layer_id == "caption"

    def test_drag_when_zoomed(self, view, store):
        """缩放后拖动按比例移动."""
        view.zoom_out()
        view.zoom_out()
        assert view.zoom_level == 0.5

        view.pointer_down((55.0, 130.0))
        view.pointer_move((75.0, 140.0))
        view.pointer_up()
        assert store.get_layer("title").position == pytest.approx((140.0, 270.0))

    def test_space_drag_pans(self, view, store):
        """按住空格拖动画布平移，不移动图层."""
        QTest.keyPress(view, Qt.Key.Key_Space)
        view.pointer_down((110.0, 260.0))
        assert view.controller.state.is_idle

        view.pointer_down((5.0, 5.0))
        view.pointer_move((45.0, 25.0))
        view.pointer_up()
        QTest.keyRelease(view, Qt.Key.Key_Space)

        assert view.controller.viewport.pan_offset == (40.0, 20.0)
        assert store.get_layer("title").position == (100, 250)


# ===================
# 键盘测试
# ===================


class TestKeyboard:
    """测试键盘快捷键."""

    def test_zoom_shortcuts(self, view, qtbot):
        """Ctrl+= / Ctrl+- / Ctrl+0."""
        spy = MagicMock()
        view.zoom_changed.connect(spy)
        with qtbot.waitSignal(view.zoom_changed, timeout=1000) as blocker:
            QTest.keyClick(view, Qt.Key.Key_Equal, Qt.KeyboardModifier.ControlModifier)
        assert blocker.args == [1.25]
        assert view.zoom_level == 1.25
        QTest.keyClick(view, Qt.Key.Key_0, Qt.KeyboardModifier.ControlModifier)
        assert view.zoom_level == 1.0
        QTest.keyClick(view, Qt.Key.Key_Minus, Qt.KeyboardModifier.ControlModifier)
        assert view.zoom_level == 0.75
        assert spy.call_count == 3

    def test_delete_and_undo(self, view, store):
        """删除选中图层后可撤销."""
        store.select_layer("screen-1", "title")
        QTest.keyClick(view, Qt.Key.Key_Delete)
        assert store.get_layer("title") is None
        assert store.selected_layer_id is None

        QTest.keyClick(view, Qt.Key.Key_Z, Qt.KeyboardModifier.ControlModifier)
        assert store.get_layer("title") is not None

        QTest.keyClick(view, Qt.Key.Key_Y, Qt.KeyboardModifier.ControlModifier)
        assert store.get_layer("title") is None

    def test_delete_without_selection_does_nothing(self, view, store):
        """未选中时删除无效果."""
        QTest.keyClick(view, Qt.Key.Key_Delete)
        assert view.history.can_undo is False

    def test_escape_closes(self, app, qtbot, store):
        """Esc 关闭编辑器并调用回调."""
        on_close = MagicMock()
        view = DesignCanvasView(store, on_close=on_close)
        qtbot.addWidget(view)

        with qtbot.waitSignal(view.closed, timeout=1000):
            QTest.keyClick(view, Qt.Key.Key_Escape)
        view.close_editor()

        on_close.assert_called_once_with()
        assert view.is_closed

    def test_window_close_notifies_once(self, app, qtbot, store):
        """关闭窗口同样调用回调，且只调用一次."""
        on_close = MagicMock()
        view = DesignCanvasView(store, on_close=on_close)
        qtbot.addWidget(view)
        view.closed.connect(view.close)

        view.close_editor()

        on_close.assert_called_once_with()


# ===================
# 工具栏测试
# ===================


def _toolbar_action(view: DesignCanvasView, text: str):
    return next(action for action in view.toolbar.actions() if action.text() == text)


class TestToolbar:
    """测试工具栏操作."""

    def test_add_screen_action(self, view, store):
        """添加屏幕后切换到新屏幕，可撤销."""
        _toolbar_action(view, "添加屏幕").trigger()
        assert store.screen_count == 3
        assert store.active_screen_id == store.screen_ids[-1]

        view.undo()
        assert store.screen_count == 2

    def test_add_text_action(self, view, store):
        """添加文字图层到活动屏幕并选中."""
        _toolbar_action(view, "添加文字").trigger()
        layer = store.selected_layer
        assert layer is not None
        assert layer.content == "New Text"
        assert store.active_screen.layer_count == 2

    def test_background_swatch_action(self, view, store):
        """色板设置活动屏幕背景色."""
        _toolbar_action(view, "#3B82F6").trigger()
        assert store.active_screen.background_color == "#3B82F6"
        assert view.history.can_undo is True


# ===================
# 绘制测试
# ===================


class TestPaint:
    """测试示意绘制."""

    def test_paint_does_not_raise(self, view, store):
        """绘制所有屏幕不报错."""
        store.select_layer("screen-1", "title")
        image = QImage(900, 700, QImage.Format.Format_ARGB32)
        painter = QPainter(image)
        try:
            view.paint_screens(painter)
        finally:
            painter.end()
        assert image.pixelColor(10, 10).isValid()
