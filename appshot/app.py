"""应用初始化和管理."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from appshot.core.composition_store import CompositionStore
from appshot.core.config_manager import get_config
from appshot.core.history import EditHistory
from appshot.models.layout_template import LayoutContent
from appshot.services.composition_storage import CompositionStorage
from appshot.services.layout_generator import require_template, seed_composition
from appshot.utils.logger import setup_logger

if TYPE_CHECKING:
    from appshot.ui.design_canvas import DesignCanvasView

logger = setup_logger(__name__)

DEFAULT_COMPOSITION_NAME = "untitled"

# 新建作品时的示例内容
DEMO_CONTENTS = (
    LayoutContent(screenshot="", headline="Track Every Expense", subtitle="Simple and fast"),
    LayoutContent(screenshot="", headline="Budgets That Work", subtitle="Stay on target"),
    LayoutContent(screenshot="", headline="Insights At A Glance"),
)


class Application:
    """应用管理类.

    负责加载配置、打开作品和在编辑器关闭时保存作品。

    Attributes:
        store: 当前作品仓库
        editor: 编辑器视图
    """

    def __init__(self, composition_name: str = DEFAULT_COMPOSITION_NAME) -> None:
        """初始化应用管理器.

        Args:
            composition_name: 打开（或新建）的作品名称
        """
        self._composition_name = composition_name
        self._storage: Optional[CompositionStorage] = None
        self._store: Optional[CompositionStore] = None
        self._editor: Optional["DesignCanvasView"] = None
        self._initialized: bool = False

    def initialize(self) -> None:
        """初始化应用.

        执行以下初始化步骤:
        1. 加载配置
        2. 初始化作品存储
        3. 打开作品（不存在时按默认模板新建）
        """
        if self._initialized:
            logger.warning("应用已初始化，跳过重复初始化")
            return

        logger.info("开始初始化应用...")

        settings = get_config().settings
        self._storage = CompositionStorage(settings.storage_dir)
        self._store = self._open_composition(settings.default_template_id)

        self._initialized = True
        logger.info("应用初始化完成")

    def _open_composition(self, template_id: str) -> CompositionStore:
        """打开作品，不存在时用模板生成新作品."""
        assert self._storage is not None
        if self._storage.exists(self._composition_name):
            snapshot = self._storage.load(self._composition_name)
            logger.info(f"已打开作品: {self._composition_name}")
            return CompositionStore.from_snapshot(snapshot)

        template = require_template(template_id)
        logger.info(f"新建作品: {self._composition_name}")
        return seed_composition(template, DEMO_CONTENTS)

    def show_editor(self, user_prompt: Optional[str] = None) -> None:
        """显示编辑器."""
        from appshot.ui.design_canvas import DesignCanvasView

        if not self._initialized:
            self.initialize()
        assert self._store is not None

        settings = get_config().settings
        history = EditHistory(self._store, max_depth=settings.history_depth)
        self._editor = DesignCanvasView(
            self._store,
            user_prompt=user_prompt,
            on_close=self.save,
            history=history,
            screen_size=settings.canvas_size,
        )
        self._editor.closed.connect(self._editor.close)
        self._editor.resize(1280, 800)
        self._editor.show()
        logger.info("编辑器已显示")

    def save(self) -> None:
        """保存当前作品."""
        if self._storage is None or self._store is None:
            return
        self._storage.save(self._composition_name, self._store.snapshot())

    @property
    def is_initialized(self) -> bool:
        """应用是否已初始化."""
        return self._initialized

    @property
    def store(self) -> Optional[CompositionStore]:
        """当前作品仓库."""
        return self._store

    @property
    def editor(self) -> Optional["DesignCanvasView"]:
        """编辑器视图."""
        return self._editor
