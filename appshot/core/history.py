"""撤销/重做.

以快照方式记录作品仓库的历史状态。调用方在一次编辑开始前调用
``checkpoint()``，之后即可 ``undo()`` / ``redo()``。

Features:
    - 快照栈（深度受限）
    - 新检查点清空重做栈
    - 栈状态变化回调
"""

from __future__ import annotations

from typing import Callable, List

from appshot.core.composition_store import CompositionStore
from appshot.models.composition import CompositionSnapshot
from appshot.utils.constants import DEFAULT_HISTORY_DEPTH
from appshot.utils.logger import setup_logger

logger = setup_logger(__name__)

HistoryListener = Callable[["EditHistory"], None]


class EditHistory:
    """编辑历史.

    Example:
        >>> store = CompositionStore()
        >>> history = EditHistory(store)
        >>> history.checkpoint()
        >>> store.add_text_layer(store.active_screen_id)
        'layer-1'
        >>> history.undo()
        True
        >>> store.active_screen.layer_count
        0
    """

    def __init__(self, store: CompositionStore, max_depth: int = DEFAULT_HISTORY_DEPTH) -> None:
        """初始化编辑历史.

        Args:
            store: 作品仓库
            max_depth: 最大栈深度
        """
        self._store = store
        self._undo_stack: List[CompositionSnapshot] = []
        self._redo_stack: List[CompositionSnapshot] = []
        self._max_depth = max_depth
        self._listeners: List[HistoryListener] = []

    @property
    def can_undo(self) -> bool:
        """是否可以撤销."""
        return len(self._undo_stack) > 0

    @property
    def can_redo(self) -> bool:
        """是否可以重做."""
        return len(self._redo_stack) > 0

    @property
    def undo_count(self) -> int:
        """撤销栈深度."""
        return len(self._undo_stack)

    @property
    def redo_count(self) -> int:
        """重做栈深度."""
        return len(self._redo_stack)

    def add_listener(self, listener: HistoryListener) -> None:
        """注册栈状态变化回调."""
        self._listeners.append(listener)

    def checkpoint(self) -> None:
        """记录当前状态为一个可撤销的检查点."""
        snapshot = self._store.snapshot()
        if self._undo_stack and self._undo_stack[-1] == snapshot:
            return

        self._undo_stack.append(snapshot)
        self._redo_stack.clear()

        while len(self._undo_stack) > self._max_depth:
            self._undo_stack.pop(0)

        self._emit_state_changed()
        logger.debug(f"记录检查点，撤销栈深度: {len(self._undo_stack)}")

    def undo(self) -> bool:
        """撤销到上一个检查点.

        Returns:
            是否成功撤销
        """
        if not self.can_undo:
            return False

        self._redo_stack.append(self._store.snapshot())
        self._store.restore(self._undo_stack.pop())
        self._emit_state_changed()
        logger.debug("撤销")
        return True

    def redo(self) -> bool:
        """重做.

        Returns:
            是否成功重做
        """
        if not self.can_redo:
            return False

        self._undo_stack.append(self._store.snapshot())
        self._store.restore(self._redo_stack.pop())
        self._emit_state_changed()
        logger.debug("重做")
        return True

    def clear(self) -> None:
        """清空所有历史."""
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._emit_state_changed()
        logger.debug("编辑历史已清空")

    def _emit_state_changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)
