"""核心业务逻辑模块."""

from appshot.core.composition_store import CompositionStore
from appshot.core.history import EditHistory
from appshot.core.interaction import (
    Dragging,
    Idle,
    InteractionController,
    InteractionState,
    KeyDown,
    KeyUp,
    LayerHit,
    MoveLayer,
    Panning,
    PointerDown,
    PointerMove,
    PointerUp,
    ResetView,
    SelectLayer,
    ZoomIn,
    ZoomOut,
    transition,
)
from appshot.core.transform import ViewportState

__all__ = [
    # 作品仓库
    "CompositionStore",
    "EditHistory",
    # 坐标变换
    "ViewportState",
    # 交互状态机
    "InteractionController",
    "InteractionState",
    "Idle",
    "Dragging",
    "Panning",
    "LayerHit",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "KeyDown",
    "KeyUp",
    "ZoomIn",
    "ZoomOut",
    "ResetView",
    "SelectLayer",
    "MoveLayer",
    "transition",
]
