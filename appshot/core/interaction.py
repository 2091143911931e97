"""交互状态机.

把指针/键盘事件转换为仓库命令。状态是不可变值，转换函数
``transition(state, event) -> (state, commands)`` 是纯函数，不依赖任何界面工具包；
``InteractionController`` 负责把命令应用到注入的 ``CompositionStore``。

状态:
    - Idle: 空闲
    - Dragging: 拖动图层
    - Panning: 按住空格拖动画布

规则:
    - 按住空格时，在画布背景上按下进入 Panning，在图层上按下被忽略
    - 未按空格时，在图层上按下会选中图层、切换活动屏幕并进入 Dragging
    - 任何状态下松开指针都回到 Idle
    - Panning 时松开空格立即回到 Idle（无需松开指针）
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional, Union

from appshot.core import transform
from appshot.core.transform import ViewportState
from appshot.models.layer import AnyLayer, Point
from appshot.utils.logger import setup_logger

if TYPE_CHECKING:
    from appshot.core.composition_store import CompositionStore
    from appshot.core.history import EditHistory

logger = setup_logger(__name__)

SPACE_KEY = "Space"


# ===================
# 交互模式
# ===================


@dataclass(frozen=True)
class Idle:
    """空闲."""


@dataclass(frozen=True)
class Dragging:
    """拖动图层.

    Attributes:
        screen_id: 图层所在屏幕
        layer_id: 被拖动的图层
        anchor: 拖动锚（视口空间，按下时确定）
    """

    screen_id: str
    layer_id: str
    anchor: Point


@dataclass(frozen=True)
class Panning:
    """平移画布，``anchor`` 为视口空间中的平移锚."""

    anchor: Point


Mode = Union[Idle, Dragging, Panning]


@dataclass(frozen=True)
class InteractionState:
    """交互状态.

    Attributes:
        mode: 当前模式
        space_pressed: 空格键是否按下（平移修饰键）
        viewport: 视口缩放与平移
    """

    mode: Mode = field(default_factory=Idle)
    space_pressed: bool = False
    viewport: ViewportState = field(default_factory=ViewportState)

    @property
    def is_idle(self) -> bool:
        """是否空闲."""
        return isinstance(self.mode, Idle)

    @property
    def is_dragging(self) -> bool:
        """是否正在拖动图层."""
        return isinstance(self.mode, Dragging)

    @property
    def is_panning(self) -> bool:
        """是否正在平移."""
        return isinstance(self.mode, Panning)


# ===================
# 输入事件
# ===================


@dataclass(frozen=True)
class LayerHit:
    """指针命中的图层.

    Attributes:
        screen_id: 图层所在屏幕
        layer_id: 图层ID
        layer_x: 图层模型空间X坐标
        layer_y: 图层模型空间Y坐标
    """

    screen_id: str
    layer_id: str
    layer_x: float
    layer_y: float

    @classmethod
    def from_layer(cls, screen_id: str, layer: AnyLayer) -> "LayerHit":
        """由图层对象构造."""
        return cls(screen_id=screen_id, layer_id=layer.id, layer_x=layer.x, layer_y=layer.y)


@dataclass(frozen=True)
class PointerDown:
    """指针按下，``hit`` 为None表示按在画布背景上."""

    position: Point
    hit: Optional[LayerHit] = None


@dataclass(frozen=True)
class PointerMove:
    """指针移动."""

    position: Point


@dataclass(frozen=True)
class PointerUp:
    """指针松开."""


@dataclass(frozen=True)
class KeyDown:
    """按键按下."""

    key: str


@dataclass(frozen=True)
class KeyUp:
    """按键松开."""

    key: str


@dataclass(frozen=True)
class ZoomIn:
    """放大一级."""


@dataclass(frozen=True)
class ZoomOut:
    """缩小一级."""


@dataclass(frozen=True)
class ResetView:
    """重置视图."""


Event = Union[PointerDown, PointerMove, PointerUp, KeyDown, KeyUp, ZoomIn, ZoomOut, ResetView]


# ===================
# 仓库命令
# ===================


@dataclass(frozen=True)
class SelectLayer:
    """选中图层并切换到其所在屏幕."""

    screen_id: str
    layer_id: str


@dataclass(frozen=True)
class MoveLayer:
    """移动图层到模型空间绝对位置."""

    screen_id: str
    layer_id: str
    x: float
    y: float


Command = Union[SelectLayer, MoveLayer]


# ===================
# 转换函数
# ===================


def transition(state: InteractionState, event: Event) -> tuple[InteractionState, list[Command]]:
    """状态转换.

    Args:
        state: 当前状态
        event: 输入事件

    Returns:
        (新状态, 需要应用到仓库的命令列表)
    """
    if isinstance(event, KeyDown):
        if event.key == SPACE_KEY and not state.space_pressed:
            return replace(state, space_pressed=True), []
        return state, []

    if isinstance(event, KeyUp):
        if event.key != SPACE_KEY:
            return state, []
        mode = Idle() if isinstance(state.mode, Panning) else state.mode
        return replace(state, space_pressed=False, mode=mode), []

    if isinstance(event, PointerDown):
        return _on_pointer_down(state, event)

    if isinstance(event, PointerMove):
        return _on_pointer_move(state, event)

    if isinstance(event, PointerUp):
        if isinstance(state.mode, Idle):
            return state, []
        return replace(state, mode=Idle()), []

    if isinstance(event, (ZoomIn, ZoomOut, ResetView)):
        # 拖动中改变缩放会使拖动锚失效
        if isinstance(state.mode, Dragging):
            return state, []
        if isinstance(event, ZoomIn):
            viewport = transform.zoom_in(state.viewport)
        elif isinstance(event, ZoomOut):
            viewport = transform.zoom_out(state.viewport)
        else:
            viewport = transform.reset_view()
        return replace(state, viewport=viewport), []

    raise TypeError(f"未知的交互事件: {event!r}")


def _on_pointer_down(
    state: InteractionState, event: PointerDown
) -> tuple[InteractionState, list[Command]]:
    if not isinstance(state.mode, Idle):
        return state, []

    if state.space_pressed:
        # 平移优先于图层操作
        if event.hit is not None:
            return state, []
        anchor = transform.pan_anchor(event.position, state.viewport.pan_offset)
        return replace(state, mode=Panning(anchor=anchor)), []

    if event.hit is None:
        return state, []

    hit = event.hit
    anchor = transform.drag_anchor(
        event.position, (hit.layer_x, hit.layer_y), state.viewport.zoom
    )
    mode = Dragging(screen_id=hit.screen_id, layer_id=hit.layer_id, anchor=anchor)
    return replace(state, mode=mode), [SelectLayer(hit.screen_id, hit.layer_id)]


def _on_pointer_move(
    state: InteractionState, event: PointerMove
) -> tuple[InteractionState, list[Command]]:
    mode = state.mode

    if isinstance(mode, Panning):
        pan_offset = transform.pan_position(event.position, mode.anchor)
        viewport = replace(state.viewport, pan_offset=pan_offset)
        return replace(state, viewport=viewport), []

    if isinstance(mode, Dragging):
        # 按住空格时图层保持不动
        if state.space_pressed:
            return state, []
        x, y = transform.drag_position(event.position, mode.anchor, state.viewport.zoom)
        return state, [MoveLayer(mode.screen_id, mode.layer_id, x, y)]

    return state, []


# ===================
# 控制器
# ===================


class InteractionController:
    """交互控制器.

    持有交互状态，把事件经 ``transition`` 转换后的命令应用到仓库。

    Example:
        >>> store = CompositionStore()
        >>> controller = InteractionController(store)
        >>> layer_id = store.add_text_layer(store.active_screen_id)
        >>> controller.press_layer((120, 260), store.active_screen_id, layer_id)
        >>> controller.dispatch(PointerMove((150, 300)))
        >>> controller.dispatch(PointerUp())
    """

    def __init__(
        self,
        store: "CompositionStore",
        history: Optional["EditHistory"] = None,
        state: Optional[InteractionState] = None,
    ) -> None:
        """初始化控制器.

        Args:
            store: 作品仓库
            history: 撤销历史，拖动开始时记录检查点
            state: 初始交互状态
        """
        self._store = store
        self._history = history
        self._state = state or InteractionState()

    @property
    def state(self) -> InteractionState:
        """当前交互状态."""
        return self._state

    @property
    def viewport(self) -> ViewportState:
        """当前视口状态."""
        return self._state.viewport

    @property
    def store(self) -> "CompositionStore":
        """作品仓库."""
        return self._store

    def dispatch(self, event: Event) -> list[Command]:
        """处理事件并应用产生的命令.

        Returns:
            已应用的命令列表
        """
        previous = self._state
        self._state, commands = transition(self._state, event)

        if self._history is not None and not previous.is_dragging and self._state.is_dragging:
            self._history.checkpoint()

        for command in commands:
            self._apply(command)

        if type(previous.mode) is not type(self._state.mode):
            logger.debug(
                f"交互状态: {type(previous.mode).__name__} -> {type(self._state.mode).__name__}"
            )
        return commands

    def hit_test(self, screen_id: str, viewport_point: Point) -> Optional[LayerHit]:
        """在指定屏幕上做命中测试.

        Args:
            screen_id: 屏幕ID
            viewport_point: 相对该屏幕原点的视口坐标（已含平移）

        Returns:
            命中的图层，未命中返回None
        """
        screen = self._store.get_screen(screen_id)
        if screen is None:
            return None
        x, y = transform.viewport_to_model(viewport_point, self._state.viewport)
        layer = screen.layer_at(x, y)
        return LayerHit.from_layer(screen_id, layer) if layer else None

    def press_layer(self, position: Point, screen_id: str, layer_id: str) -> list[Command]:
        """在图层上按下指针（按仓库中图层当前位置构造命中信息）."""
        layer = self._store.get_layer(layer_id, screen_id)
        hit = LayerHit.from_layer(screen_id, layer) if layer else None
        if hit is None:
            return []
        return self.dispatch(PointerDown(position, hit))

    def _apply(self, command: Command) -> None:
        if isinstance(command, SelectLayer):
            self._store.select_layer(command.screen_id, command.layer_id)
        elif isinstance(command, MoveLayer):
            self._store.move_layer(
                command.layer_id, command.x, command.y, screen_id=command.screen_id
            )
