"""界面组件模块."""

from appshot.ui.design_canvas import DesignCanvasView

__all__ = ["DesignCanvasView"]
