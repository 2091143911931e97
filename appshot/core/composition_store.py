"""作品状态仓库.

屏幕、图层和选中状态的唯一数据源。所有修改都经过这里的具名方法，
撤销/重做、持久化等协作方可以随时通过 ``snapshot()`` 得到一致的快照。

引用不存在的屏幕或图层ID的操作会被忽略（记录 DEBUG 日志），不会抛出异常：
界面事件可能延迟送达，引用已经删除的对象。

Features:
    - 屏幕增删、切换、背景色
    - 图层添加、删除、内容/样式补丁、移动
    - 选中状态维护（删除图层时清除，不留悬空引用）
    - 单调递增的ID生成
    - 变更通知、快照导出与恢复
"""

from __future__ import annotations

import itertools
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from pydantic import ValidationError

from appshot.models.composition import CompositionSnapshot
from appshot.models.layer import AnyLayer, ImageLayer, TextLayer, apply_layer_patch
from appshot.models.screen import Screen
from appshot.utils.colors import normalize_color
from appshot.utils.constants import DEFAULT_SCREEN_BACKGROUND, SCREEN_NAME_FORMAT
from appshot.utils.exceptions import CompositionError
from appshot.utils.logger import setup_logger

logger = setup_logger(__name__)

StoreListener = Callable[["CompositionStore"], None]

SCREEN_ID_PREFIX = "screen-"
LAYER_ID_PREFIX = "layer-"


class CompositionStore:
    """作品状态仓库.

    读取方法返回深拷贝，外部无法绕过仓库直接修改状态。

    Attributes:
        active_screen_id: 当前活动屏幕ID
        selected_layer_id: 当前选中图层ID（属于活动屏幕），未选中为None

    Example:
        >>> store = CompositionStore()
        >>> screen_id = store.add_screen()
        >>> layer_id = store.add_text_layer(screen_id)
        >>> store.move_layer(layer_id, -20, 40)
        >>> store.get_layer(layer_id).position
        (-20.0, 40.0)
    """

    def __init__(
        self,
        screens: Optional[Iterable[Screen]] = None,
        active_screen_id: Optional[str] = None,
        selected_layer_id: Optional[str] = None,
    ) -> None:
        """初始化仓库.

        Args:
            screens: 初始屏幕列表，为空时创建一个空白屏幕
            active_screen_id: 活动屏幕ID，默认第一个屏幕
            selected_layer_id: 选中图层ID

        Raises:
            ValueError: 屏幕ID重复
        """
        self._screen_counter: Iterator[int] = itertools.count(1)
        self._layer_counter: Iterator[int] = itertools.count(1)
        self._listeners: list[StoreListener] = []

        self._screens: list[Screen] = [s.model_copy(deep=True) for s in screens or []]
        screen_ids = [screen.id for screen in self._screens]
        if len(set(screen_ids)) != len(screen_ids):
            raise ValueError("屏幕ID必须唯一")
        if not self._screens:
            self._screens.append(self._new_screen())

        self._active_screen_id = self._screens[0].id
        if active_screen_id is not None and self._find_screen(active_screen_id):
            self._active_screen_id = active_screen_id

        self._selected_layer_id: Optional[str] = None
        if selected_layer_id is not None and self._active().has_layer(selected_layer_id):
            self._selected_layer_id = selected_layer_id

    @classmethod
    def from_snapshot(cls, snapshot: CompositionSnapshot) -> "CompositionStore":
        """从快照重建仓库."""
        return cls(
            screens=snapshot.screens,
            active_screen_id=snapshot.active_screen_id,
            selected_layer_id=snapshot.selected_layer_id,
        )

    # ========================
    # 变更通知
    # ========================

    def subscribe(self, listener: StoreListener) -> None:
        """注册变更监听器，每次成功修改后以仓库为参数调用."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        """移除变更监听器."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ========================
    # 只读访问
    # ========================

    @property
    def active_screen_id(self) -> str:
        """当前活动屏幕ID."""
        return self._active_screen_id

    @property
    def selected_layer_id(self) -> Optional[str]:
        """当前选中图层ID."""
        return self._selected_layer_id

    @property
    def screen_count(self) -> int:
        """屏幕数量."""
        return len(self._screens)

    @property
    def screen_ids(self) -> list[str]:
        """按顺序排列的屏幕ID."""
        return [screen.id for screen in self._screens]

    @property
    def screens(self) -> list[Screen]:
        """所有屏幕（深拷贝）."""
        return self.export_screens()

    @property
    def active_screen(self) -> Screen:
        """活动屏幕（深拷贝）."""
        return self._active().model_copy(deep=True)

    @property
    def selected_layer(self) -> Optional[AnyLayer]:
        """选中的图层（深拷贝），未选中返回None."""
        if self._selected_layer_id is None:
            return None
        layer = self._active().get_layer(self._selected_layer_id)
        return layer.model_copy(deep=True) if layer else None

    def get_screen(self, screen_id: str) -> Optional[Screen]:
        """根据ID获取屏幕（深拷贝）."""
        screen = self._find_screen(screen_id)
        return screen.model_copy(deep=True) if screen else None

    def get_layer(self, layer_id: str, screen_id: Optional[str] = None) -> Optional[AnyLayer]:
        """根据ID获取图层（深拷贝）.

        Args:
            layer_id: 图层ID
            screen_id: 所属屏幕，省略时先查活动屏幕再按顺序查其他屏幕

        Returns:
            图层，不存在返回None
        """
        found = self._locate_layer(layer_id, screen_id)
        if found is None:
            return None
        screen, index = found
        return screen.layers[index].model_copy(deep=True)

    def snapshot(self) -> CompositionSnapshot:
        """获取当前状态的一致快照."""
        return CompositionSnapshot(
            screens=self.export_screens(),
            active_screen_id=self._active_screen_id,
            selected_layer_id=self._selected_layer_id,
        )

    def export_screens(self) -> list[Screen]:
        """导出所有屏幕及其图层（按绘制顺序），供渲染端光栅化."""
        return [screen.model_copy(deep=True) for screen in self._screens]

    # ========================
    # 屏幕操作
    # ========================

    def add_screen(self, name: Optional[str] = None) -> str:
        """追加空白屏幕并设为活动屏幕.

        Args:
            name: 显示名称，默认 "Screen N"

        Returns:
            新屏幕ID
        """
        screen = self._new_screen(name)
        self._screens.append(screen)
        self._activate(screen.id)
        logger.debug(f"添加屏幕: {screen.id}")
        self._notify()
        return screen.id

    def add_screen_with_layers(
        self,
        layers: Iterable[AnyLayer],
        background_color: Optional[str] = None,
        name: Optional[str] = None,
    ) -> str:
        """追加带有初始图层的屏幕（用于模板生成的播种），并设为活动屏幕.

        Args:
            layers: 初始图层（按绘制顺序）
            background_color: 背景色，默认白色
            name: 显示名称

        Returns:
            新屏幕ID
        """
        blank = self._new_screen(name, background_color)
        screen = Screen(
            id=blank.id,
            name=blank.name,
            background_color=blank.background_color,
            layers=[layer.model_copy(deep=True) for layer in layers],
        )
        self._screens.append(screen)
        self._activate(screen.id)
        logger.debug(f"添加屏幕: {screen.id}，图层数: {screen.layer_count}")
        self._notify()
        return screen.id

    def remove_screen(self, screen_id: str) -> None:
        """删除屏幕.

        不会删除最后一个屏幕。删除活动屏幕时，相邻屏幕成为活动屏幕。
        """
        screen = self._find_screen(screen_id)
        if screen is None:
            logger.debug(f"删除屏幕被忽略，屏幕不存在: {screen_id}")
            return
        if len(self._screens) == 1:
            logger.debug("删除屏幕被忽略，作品至少保留一个屏幕")
            return

        index = self._screens.index(screen)
        self._screens.pop(index)
        if screen_id == self._active_screen_id:
            neighbour = self._screens[min(index, len(self._screens) - 1)]
            self._activate(neighbour.id)
        logger.debug(f"删除屏幕: {screen_id}")
        self._notify()

    def set_active_screen(self, screen_id: str) -> None:
        """切换活动屏幕，ID不存在时忽略."""
        if self._find_screen(screen_id) is None:
            logger.debug(f"切换屏幕被忽略，屏幕不存在: {screen_id}")
            return
        if screen_id == self._active_screen_id:
            return
        self._activate(screen_id)
        self._notify()

    def set_background_color(self, screen_id: str, color: str) -> None:
        """设置指定屏幕的背景色，屏幕不存在时忽略."""
        screen = self._find_screen(screen_id)
        if screen is None:
            logger.debug(f"设置背景色被忽略，屏幕不存在: {screen_id}")
            return
        try:
            screen.background_color = normalize_color(color)
        except ValueError as e:
            logger.warning(f"设置背景色被忽略: {e}")
            return
        self._notify()

    # ========================
    # 图层操作
    # ========================

    def add_text_layer(self, screen_id: str) -> Optional[str]:
        """向指定屏幕追加默认文字图层并选中.

        Returns:
            新图层ID，屏幕不存在时返回None
        """
        screen = self._find_screen(screen_id)
        if screen is None:
            logger.debug(f"添加文字图层被忽略，屏幕不存在: {screen_id}")
            return None
        layer = TextLayer.create(self._next_layer_id(screen))
        return self._append_and_select(screen, layer)

    def add_image_layer(self, screen_id: str, content: str) -> Optional[str]:
        """向指定屏幕追加图片图层并选中.

        Args:
            screen_id: 屏幕ID
            content: 图片引用（URL 或 data URL）

        Returns:
            新图层ID，屏幕不存在时返回None
        """
        screen = self._find_screen(screen_id)
        if screen is None:
            logger.debug(f"添加图片图层被忽略，屏幕不存在: {screen_id}")
            return None
        layer = ImageLayer.create(self._next_layer_id(screen), content)
        return self._append_and_select(screen, layer)

    def delete_layer(self, screen_id: str, layer_id: str) -> None:
        """删除图层；若该图层被选中则清除选中状态."""
        screen = self._find_screen(screen_id)
        index = screen.index_of(layer_id) if screen else None
        if screen is None or index is None:
            logger.debug(f"删除图层被忽略，图层不存在: {screen_id}/{layer_id}")
            return

        screen.layers.pop(index)
        if screen_id == self._active_screen_id and self._selected_layer_id == layer_id:
            self._selected_layer_id = None
        logger.debug(f"删除图层: {screen_id}/{layer_id}")
        self._notify()

    def update_layer_content(
        self, layer_id: str, content: str, screen_id: Optional[str] = None
    ) -> None:
        """更新图层内容（文字或图片引用），其余字段不变."""
        self._patch_layer(layer_id, {"content": content}, screen_id)

    def update_layer_style(
        self,
        layer_id: str,
        style: Mapping[str, Any],
        screen_id: Optional[str] = None,
    ) -> None:
        """以合并语义更新图层样式.

        只修改提供的字段；不属于该图层类型的字段被忽略，
        字段值无效时整个更新被忽略。
        """
        self._patch_layer(layer_id, style, screen_id)

    def move_layer(
        self, layer_id: str, x: float, y: float, screen_id: Optional[str] = None
    ) -> None:
        """将图层移动到模型空间绝对位置，不做边界限制."""
        found = self._locate_layer(layer_id, screen_id)
        if found is None:
            logger.debug(f"移动图层被忽略，图层不存在: {layer_id}")
            return
        screen, index = found
        screen.layers[index] = screen.layers[index].model_copy(
            update={"x": float(x), "y": float(y)}
        )
        self._notify()

    # ========================
    # 选中状态
    # ========================

    def select_layer(self, screen_id: str, layer_id: str) -> None:
        """选中图层，并将其所在屏幕设为活动屏幕."""
        screen = self._find_screen(screen_id)
        if screen is None or not screen.has_layer(layer_id):
            logger.debug(f"选中图层被忽略，图层不存在: {screen_id}/{layer_id}")
            return
        if screen_id != self._active_screen_id:
            self._activate(screen_id)
        self._selected_layer_id = layer_id
        self._notify()

    def clear_selection(self) -> None:
        """清除选中状态."""
        if self._selected_layer_id is None:
            return
        self._selected_layer_id = None
        self._notify()

    # ========================
    # 快照恢复
    # ========================

    def restore(self, snapshot: CompositionSnapshot) -> None:
        """用快照整体替换当前状态（ID计数器继续递增）."""
        self._screens = [screen.model_copy(deep=True) for screen in snapshot.screens]
        self._active_screen_id = snapshot.active_screen_id
        self._selected_layer_id = snapshot.selected_layer_id
        logger.debug(f"恢复快照，屏幕数: {len(self._screens)}")
        self._notify()

    # ========================
    # 内部方法
    # ========================

    def _active(self) -> Screen:
        screen = self._find_screen(self._active_screen_id)
        if screen is None:
            raise CompositionError(f"活动屏幕不存在: {self._active_screen_id}")
        return screen

    def _activate(self, screen_id: str) -> None:
        """切换活动屏幕；选中状态只属于活动屏幕，因此一并清除."""
        if screen_id != self._active_screen_id:
            self._selected_layer_id = None
        self._active_screen_id = screen_id

    def _find_screen(self, screen_id: str) -> Optional[Screen]:
        for screen in self._screens:
            if screen.id == screen_id:
                return screen
        return None

    def _locate_layer(
        self, layer_id: str, screen_id: Optional[str] = None
    ) -> Optional[tuple[Screen, int]]:
        """定位图层，返回 (屏幕, 索引)."""
        if screen_id is not None:
            candidates = [s for s in self._screens if s.id == screen_id]
        else:
            active = self._active()
            candidates = [active] + [s for s in self._screens if s is not active]

        for screen in candidates:
            index = screen.index_of(layer_id)
            if index is not None:
                return screen, index
        return None

    def _patch_layer(
        self,
        layer_id: str,
        patch: Mapping[str, Any],
        screen_id: Optional[str] = None,
    ) -> None:
        found = self._locate_layer(layer_id, screen_id)
        if found is None:
            logger.debug(f"更新图层被忽略，图层不存在: {layer_id}")
            return
        screen, index = found
        try:
            updated = apply_layer_patch(screen.layers[index], patch)
        except ValidationError as e:
            logger.warning(f"更新图层 {layer_id} 被忽略，字段无效: {e.error_count()} 处错误")
            return
        if updated is screen.layers[index]:
            return
        screen.layers[index] = updated
        self._notify()

    def _append_and_select(self, screen: Screen, layer: AnyLayer) -> str:
        screen.layers.append(layer)
        self._activate(screen.id)
        self._selected_layer_id = layer.id
        logger.debug(f"添加图层: {screen.id}/{layer.id} ({layer.type.value})")
        self._notify()
        return layer.id

    def _new_screen(
        self, name: Optional[str] = None, background_color: Optional[str] = None
    ) -> Screen:
        index = len(self._screens) + 1
        return Screen(
            id=self._next_screen_id(),
            name=name or SCREEN_NAME_FORMAT.format(index=index),
            background_color=background_color or DEFAULT_SCREEN_BACKGROUND,
        )

    def _next_screen_id(self) -> str:
        existing = {s.id for s in self._screens}
        while True:
            candidate = f"{SCREEN_ID_PREFIX}{next(self._screen_counter)}"
            if candidate not in existing:
                return candidate

    def _next_layer_id(self, screen: Screen) -> str:
        existing = set(screen.layer_ids)
        while True:
            candidate = f"{LAYER_ID_PREFIX}{next(self._layer_counter)}"
            if candidate not in existing:
                return candidate
