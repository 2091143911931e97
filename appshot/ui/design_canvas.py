"""设计画布组件.

嵌入宿主界面的多屏编辑画布。鼠标和键盘事件被转换为交互状态机事件，
界面只负责示意性绘制（屏幕边框、图层矩形、选中框），不做真实光栅化。

Features:
    - 多屏横向排列，统一缩放与平移
    - 拖动图层、空格+拖动平移画布
    - Ctrl+滚轮 / Ctrl+= / Ctrl+- / Ctrl+0 缩放
    - Delete 删除选中图层，Ctrl+Z / Ctrl+Y 撤销重做
    - Esc 关闭编辑器
"""

from __future__ import annotations

from typing import Callable, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import (
    QAction,
    QBrush,
    QCloseEvent,
    QColor,
    QIcon,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPen,
    QPixmap,
    QTextOption,
    QWheelEvent,
)
from PyQt6.QtWidgets import QLabel, QToolBar, QVBoxLayout, QWidget

from appshot.core import transform
from appshot.core.composition_store import CompositionStore
from appshot.core.history import EditHistory
from appshot.core.interaction import (
    SPACE_KEY,
    InteractionController,
    KeyDown,
    KeyUp,
    PointerDown,
    PointerMove,
    PointerUp,
    ResetView,
    ZoomIn,
    ZoomOut,
)
from appshot.models.layer import LayerType, Point, TextAlign
from appshot.models.screen import Screen
from appshot.utils.colors import color_to_rgba
from appshot.utils.constants import (
    BACKGROUND_SWATCHES,
    SCREEN_GAP,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
)
from appshot.utils.logger import setup_logger

logger = setup_logger(__name__)


# ===================
# 常量定义
# ===================

CANVAS_BACKGROUND_COLOR = QColor(235, 235, 235)
SCREEN_BORDER_COLOR = QColor(200, 200, 200)
ACTIVE_SCREEN_BORDER_COLOR = QColor(90, 90, 90)
LAYER_OUTLINE_COLOR = QColor(150, 150, 150)
SELECTION_COLOR = QColor(0, 120, 215)
MOCKUP_FILL_COLOR = QColor(30, 30, 30, 60)


def screen_offset(index: int, zoom: float, screen_width: float = SCREEN_WIDTH) -> float:
    """第 index 个屏幕相对画布左边缘的视口偏移（不含平移）."""
    return index * (screen_width * zoom + SCREEN_GAP)


# ===================
# 屏幕条
# ===================


class _ScreenStrip(QWidget):
    """绘制屏幕并把鼠标事件转发给所属画布视图."""

    def __init__(self, view: "DesignCanvasView") -> None:
        super().__init__(view)
        self._view = view
        self.setMouseTracking(True)
        self.setMinimumSize(SCREEN_WIDTH + 2 * SCREEN_GAP, SCREEN_HEIGHT // 2)

    def paintEvent(self, event: QPaintEvent) -> None:
        """绘制画布."""
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(self.rect(), CANVAS_BACKGROUND_COLOR)
            self._view.paint_screens(painter)
        finally:
            painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """鼠标按下事件."""
        if event.button() == Qt.MouseButton.LeftButton:
            self._view.pointer_down(_to_point(event.position()))
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """鼠标移动事件."""
        self._view.pointer_move(_to_point(event.position()))
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """鼠标释放事件."""
        if event.button() == Qt.MouseButton.LeftButton:
            self._view.pointer_up()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """鼠标滚轮事件 - Ctrl + 滚轮缩放."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if event.angleDelta().y() > 0:
                self._view.zoom_in()
            else:
                self._view.zoom_out()
            event.accept()
            return
        super().wheelEvent(event)


def _to_point(position: QPointF) -> Point:
    return (position.x(), position.y())


# ===================
# 画布视图
# ===================


class DesignCanvasView(QWidget):
    """设计画布视图.

    Signals:
        closed: 用户关闭编辑器
        zoom_changed: 缩放比例改变

    Example:
        >>> store = CompositionStore()
        >>> view = DesignCanvasView(store, user_prompt="记账应用截图")
        >>> view.closed.connect(lambda: print("closed"))
        >>> view.show()
    """

    closed = pyqtSignal()
    zoom_changed = pyqtSignal(float)  # zoom_level

    def __init__(
        self,
        store: CompositionStore,
        user_prompt: Optional[str] = None,
        on_close: Optional[Callable[[], None]] = None,
        history: Optional[EditHistory] = None,
        screen_size: tuple[int, int] = (SCREEN_WIDTH, SCREEN_HEIGHT),
        parent: Optional[QWidget] = None,
    ) -> None:
        """初始化画布视图.

        Args:
            store: 作品仓库
            user_prompt: 只读显示的用户提示词
            on_close: 关闭回调（无参数）
            history: 撤销历史，默认新建
            screen_size: 单屏尺寸（模型单位）
            parent: 父组件
        """
        super().__init__(parent)

        self._store = store
        self._user_prompt = user_prompt
        self._on_close = on_close
        self._history = history if history is not None else EditHistory(store)
        self._controller = InteractionController(store, history=self._history)
        self._screen_width, self._screen_height = screen_size
        self._is_closed = False

        self._setup_ui()
        self._store.subscribe(self._on_store_changed)

    # ========================
    # 初始化
    # ========================

    def _setup_ui(self) -> None:
        """设置UI."""
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._prompt_label = QLabel(self._user_prompt or "")
        self._prompt_label.setWordWrap(True)
        self._prompt_label.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
        )
        self._prompt_label.setContentsMargins(12, 8, 12, 8)
        self._prompt_label.setVisible(bool(self._user_prompt))
        layout.addWidget(self._prompt_label)

        self._setup_toolbar()
        layout.addWidget(self._toolbar)

        self._strip = _ScreenStrip(self)
        layout.addWidget(self._strip, 1)

    def _setup_toolbar(self) -> None:
        """设置工具栏."""
        self._toolbar = QToolBar("编辑工具栏", self)
        self._toolbar.setMovable(False)

        self._action_add_screen = QAction("添加屏幕", self)
        self._action_add_screen.setToolTip("追加空白屏幕")
        self._action_add_screen.triggered.connect(self.add_screen)
        self._toolbar.addAction(self._action_add_screen)

        self._action_add_text = QAction("添加文字", self)
        self._action_add_text.setToolTip("向活动屏幕添加文字图层")
        self._action_add_text.triggered.connect(self.add_text_layer)
        self._toolbar.addAction(self._action_add_text)

        self._toolbar.addSeparator()

        # 背景色板
        for color in BACKGROUND_SWATCHES:
            pixmap = QPixmap(16, 16)
            pixmap.fill(_qcolor(color))
            action = QAction(QIcon(pixmap), color, self)
            action.setToolTip(f"背景色 {color}")
            action.triggered.connect(
                lambda _checked=False, c=color: self.set_background_color(c)
            )
            self._toolbar.addAction(action)

    # ========================
    # 公共属性
    # ========================

    @property
    def store(self) -> CompositionStore:
        """作品仓库."""
        return self._store

    @property
    def history(self) -> EditHistory:
        """撤销历史."""
        return self._history

    @property
    def controller(self) -> InteractionController:
        """交互控制器."""
        return self._controller

    @property
    def user_prompt(self) -> Optional[str]:
        """用户提示词."""
        return self._user_prompt

    @property
    def zoom_level(self) -> float:
        """当前缩放比例."""
        return self._controller.viewport.zoom

    @property
    def screen_size(self) -> tuple[int, int]:
        """单屏尺寸."""
        return (self._screen_width, self._screen_height)

    @property
    def is_closed(self) -> bool:
        """编辑器是否已关闭."""
        return self._is_closed

    # ========================
    # 指针事件
    # ========================

    def locate_screen(self, point: Point) -> Optional[tuple[str, Point]]:
        """查找画布坐标所在的屏幕.

        Returns:
            (屏幕ID, 相对该屏幕原点的视口坐标)，不在任何屏幕内返回None
        """
        viewport = self._controller.viewport
        for index, screen_id in enumerate(self._store.screen_ids):
            offset = screen_offset(index, viewport.zoom, self._screen_width)
            local = (point[0] - offset, point[1])
            x, y = transform.viewport_to_model(local, viewport)
            if 0 <= x <= self._screen_width and 0 <= y <= self._screen_height:
                return screen_id, local
        return None

    def pointer_down(self, point: Point) -> None:
        """指针按下（画布坐标）."""
        self.setFocus()
        hit = None
        located = self.locate_screen(point)
        if located is not None:
            screen_id, local = located
            hit = self._controller.hit_test(screen_id, local)
        self._dispatch(PointerDown(point, hit))
        self._update_cursor()

    def pointer_move(self, point: Point) -> None:
        """指针移动（画布坐标）."""
        self._dispatch(PointerMove(point))

    def pointer_up(self) -> None:
        """指针松开."""
        self._dispatch(PointerUp())
        self._update_cursor()

    # ========================
    # 视图控制
    # ========================

    def zoom_in(self) -> None:
        """放大."""
        self._dispatch(ZoomIn())

    def zoom_out(self) -> None:
        """缩小."""
        self._dispatch(ZoomOut())

    def reset_view(self) -> None:
        """重置缩放与平移."""
        self._dispatch(ResetView())

    # ========================
    # 编辑操作
    # ========================

    @property
    def toolbar(self) -> QToolBar:
        """编辑工具栏."""
        return self._toolbar

    def add_screen(self) -> str:
        """追加空白屏幕并切换到该屏幕."""
        self._history.checkpoint()
        return self._store.add_screen()

    def add_text_layer(self) -> Optional[str]:
        """向活动屏幕添加默认文字图层."""
        self._history.checkpoint()
        return self._store.add_text_layer(self._store.active_screen_id)

    def set_background_color(self, color: str) -> None:
        """设置活动屏幕背景色."""
        self._history.checkpoint()
        self._store.set_background_color(self._store.active_screen_id, color)

    def delete_selected_layer(self) -> None:
        """删除选中图层."""
        layer_id = self._store.selected_layer_id
        if layer_id is None:
            return
        self._history.checkpoint()
        self._store.delete_layer(self._store.active_screen_id, layer_id)

    def undo(self) -> None:
        """撤销."""
        self._history.undo()

    def redo(self) -> None:
        """重做."""
        self._history.redo()

    def close_editor(self) -> None:
        """关闭编辑器：调用关闭回调并发送 closed 信号（只生效一次）."""
        if self._is_closed:
            return
        self._is_closed = True
        self._store.unsubscribe(self._on_store_changed)
        logger.info("编辑器已关闭")
        if self._on_close is not None:
            self._on_close()
        self.closed.emit()

    def closeEvent(self, event: QCloseEvent) -> None:
        """窗口关闭事件."""
        self.close_editor()
        super().closeEvent(event)

    # ========================
    # 键盘事件
    # ========================

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """按键按下事件."""
        key = event.key()
        ctrl = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
        shift = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)

        if key == Qt.Key.Key_Space:
            if not event.isAutoRepeat():
                self._dispatch(KeyDown(SPACE_KEY))
                self._update_cursor()
        elif key == Qt.Key.Key_Escape:
            self.close_editor()
        elif key in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.delete_selected_layer()
        elif ctrl and key == Qt.Key.Key_Z:
            if shift:
                self.redo()
            else:
                self.undo()
        elif ctrl and key == Qt.Key.Key_Y:
            self.redo()
        elif ctrl and key in (Qt.Key.Key_Equal, Qt.Key.Key_Plus):
            self.zoom_in()
        elif ctrl and key == Qt.Key.Key_Minus:
            self.zoom_out()
        elif ctrl and key == Qt.Key.Key_0:
            self.reset_view()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        """按键释放事件."""
        if event.key() == Qt.Key.Key_Space and not event.isAutoRepeat():
            self._dispatch(KeyUp(SPACE_KEY))
            self._update_cursor()
            event.accept()
            return
        super().keyReleaseEvent(event)

    # ========================
    # 绘制
    # ========================

    def paint_screens(self, painter: QPainter) -> None:
        """绘制所有屏幕（示意）."""
        viewport = self._controller.viewport
        active_id = self._store.active_screen_id
        selected_id = self._store.selected_layer_id

        for index, screen in enumerate(self._store.export_screens()):
            painter.save()
            painter.translate(screen_offset(index, viewport.zoom, self._screen_width), 0)
            self._paint_screen(painter, screen, screen.id == active_id, selected_id)
            painter.restore()

    def _paint_screen(
        self,
        painter: QPainter,
        screen: Screen,
        is_active: bool,
        selected_id: Optional[str],
    ) -> None:
        viewport = self._controller.viewport
        x, y = transform.model_to_viewport((0.0, 0.0), viewport)
        frame = QRectF(
            x, y, self._screen_width * viewport.zoom, self._screen_height * viewport.zoom
        )

        painter.fillRect(frame, _qcolor(screen.background_color))
        painter.save()
        painter.setClipRect(frame)

        for layer in screen.layers:
            rect = QRectF(*transform.model_rect_to_viewport(layer, viewport))
            if layer.type == LayerType.BACKGROUND:
                painter.fillRect(frame, _qcolor(layer.background_color))
            elif layer.type == LayerType.MOCKUP:
                painter.fillRect(rect, QBrush(MOCKUP_FILL_COLOR))
            elif layer.type == LayerType.TEXT:
                painter.setPen(_qcolor(layer.color))
                font = painter.font()
                font.setPointSizeF(max(1.0, layer.font_size * viewport.zoom * 0.75))
                font.setBold(layer.bold)
                font.setItalic(layer.italic)
                font.setUnderline(layer.underline)
                painter.setFont(font)
                painter.drawText(rect, layer.content, _text_option(layer.align))
            else:
                painter.setPen(QPen(LAYER_OUTLINE_COLOR, 1, Qt.PenStyle.DashLine))
                painter.drawRect(rect)

            if is_active and layer.id == selected_id:
                painter.setPen(QPen(SELECTION_COLOR, 2))
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(rect)

        painter.restore()

        border = ACTIVE_SCREEN_BORDER_COLOR if is_active else SCREEN_BORDER_COLOR
        painter.setPen(QPen(border, 2 if is_active else 1))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRect(frame)

    # ========================
    # 内部方法
    # ========================

    def _dispatch(self, event: object) -> None:
        zoom = self._controller.viewport.zoom
        viewport = self._controller.viewport
        self._controller.dispatch(event)
        if self._controller.viewport.zoom != zoom:
            self.zoom_changed.emit(self._controller.viewport.zoom)
        if self._controller.viewport != viewport:
            self._strip.update()

    def _update_cursor(self) -> None:
        state = self._controller.state
        if state.is_panning:
            self._strip.setCursor(Qt.CursorShape.ClosedHandCursor)
        elif state.space_pressed:
            self._strip.setCursor(Qt.CursorShape.OpenHandCursor)
        else:
            self._strip.setCursor(Qt.CursorShape.ArrowCursor)

    def _on_store_changed(self, store: CompositionStore) -> None:
        self._strip.update()


def _qcolor(value: str) -> QColor:
    return QColor(*color_to_rgba(value))


def _text_option(align: TextAlign) -> QTextOption:
    horizontal = {
        TextAlign.LEFT: Qt.AlignmentFlag.AlignLeft,
        TextAlign.CENTER: Qt.AlignmentFlag.AlignHCenter,
        TextAlign.RIGHT: Qt.AlignmentFlag.AlignRight,
    }[align]
    option = QTextOption(horizontal | Qt.AlignmentFlag.AlignTop)
    option.setWrapMode(QTextOption.WrapMode.WordWrap)
    return option
