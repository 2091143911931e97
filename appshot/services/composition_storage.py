"""作品存储服务.

把作品快照以 ``.composition.json`` 文件保存到本地目录。

Features:
    - 保存、加载、删除作品
    - 作品列表（按修改时间倒序）
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from appshot.models.composition import CompositionSnapshot
from appshot.utils.exceptions import CompositionLoadError, SnapshotFormatError
from appshot.utils.logger import setup_logger

logger = setup_logger(__name__)

# 作品文件扩展名
COMPOSITION_EXTENSION = ".composition.json"

_INVALID_NAME_CHARS = re.compile(r"[^\w\-]+", re.UNICODE)


def slugify_name(name: str) -> str:
    """把作品名称转换为安全的文件名（不含扩展名）.

    Raises:
        ValueError: 名称为空
    """
    slug = _INVALID_NAME_CHARS.sub("-", name.strip()).strip("-")
    if not slug:
        raise ValueError(f"无效的作品名称: {name!r}")
    return slug


@dataclass
class CompositionMetadata:
    """作品元数据，用于列表显示."""

    name: str
    file_path: Path
    screen_count: int
    layer_count: int
    modified_at: datetime


class CompositionStorage:
    """作品存储.

    Example:
        >>> storage = CompositionStorage("/tmp/appshot")
        >>> storage.save("launch", store.snapshot())
        >>> snapshot = storage.load("launch")
    """

    def __init__(self, storage_dir: Optional[Union[str, Path]] = None) -> None:
        """初始化作品存储.

        Args:
            storage_dir: 存储目录，默认取应用设置中的作品目录
        """
        if storage_dir is not None:
            self._storage_dir = Path(storage_dir)
        else:
            from appshot.core.config_manager import get_config

            self._storage_dir = get_config().settings.storage_dir

        self._storage_dir.mkdir(parents=True, exist_ok=True)

    @property
    def storage_dir(self) -> Path:
        """存储目录."""
        return self._storage_dir

    def path_for(self, name: str) -> Path:
        """获取作品文件路径."""
        return self._storage_dir / f"{slugify_name(name)}{COMPOSITION_EXTENSION}"

    def exists(self, name: str) -> bool:
        """作品是否存在."""
        return self.path_for(name).exists()

    def save(self, name: str, snapshot: CompositionSnapshot) -> Path:
        """保存作品（同名覆盖）.

        Args:
            name: 作品名称
            snapshot: 作品快照

        Returns:
            文件路径
        """
        path = self.path_for(name)
        snapshot.save_to_file(path)
        logger.info(f"作品已保存: {path.name}")
        return path

    def load(self, name: str) -> CompositionSnapshot:
        """加载作品.

        Raises:
            CompositionLoadError: 文件不存在或内容无效
        """
        return self._load_from_file(self.path_for(name))

    def delete(self, name: str) -> bool:
        """删除作品.

        Returns:
            是否删除成功
        """
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"作品已删除: {path.name}")
        return True

    def list_compositions(self) -> List[CompositionMetadata]:
        """获取作品列表，无法读取的文件会被跳过."""
        result: List[CompositionMetadata] = []
        for file_path in self._storage_dir.glob(f"*{COMPOSITION_EXTENSION}"):
            try:
                snapshot = self._load_from_file(file_path)
            except CompositionLoadError as e:
                logger.warning(f"跳过无效的作品文件: {e.message}")
                continue

            result.append(
                CompositionMetadata(
                    name=file_path.name[: -len(COMPOSITION_EXTENSION)],
                    file_path=file_path,
                    screen_count=len(snapshot.screens),
                    layer_count=sum(s.layer_count for s in snapshot.screens),
                    modified_at=datetime.fromtimestamp(file_path.stat().st_mtime),
                )
            )

        # 最新的在前
        result.sort(key=lambda m: m.modified_at, reverse=True)
        return result

    def _load_from_file(self, file_path: Path) -> CompositionSnapshot:
        if not file_path.exists():
            raise CompositionLoadError(str(file_path), "文件不存在")
        try:
            return CompositionSnapshot.from_file(file_path)
        except (OSError, SnapshotFormatError) as e:
            logger.error(f"加载作品失败: {file_path}, 错误: {e}")
            raise CompositionLoadError(str(file_path), str(e)) from e
