"""作品存储服务单元测试."""

import pytest

from appshot.services.composition_storage import (
    COMPOSITION_EXTENSION,
    CompositionStorage,
    slugify_name,
)
from appshot.utils.exceptions import CompositionLoadError


@pytest.fixture
def storage(tmp_path) -> CompositionStorage:
    """临时目录中的作品存储."""
    return CompositionStorage(tmp_path / "store")


class TestSlugifyName:
    """测试作品名称转换."""

    def test_should_replace_unsafe_chars(self):
        """不安全字符替换为短横线."""
        assert slugify_name("My App / v2") == "My-App-v2"

    def test_should_keep_unicode_words(self):
        """保留中文."""
        assert slugify_name("记账 应用") == "记账-应用"

    def test_empty_name_raises(self):
        """空名称报错."""
        with pytest.raises(ValueError):
            slugify_name(" / ")


class TestCompositionStorage:
    """测试作品存储."""

    def test_should_create_directory(self, tmp_path):
        """应自动创建存储目录."""
        storage = CompositionStorage(tmp_path / "a" / "b")
        assert storage.storage_dir.is_dir()

    def test_default_directory_from_settings(self, tmp_path):
        """默认使用设置中的作品目录."""
        assert CompositionStorage().storage_dir == tmp_path / "compositions"

    def test_save_and_load(self, storage, store):
        """保存后可以加载."""
        store.add_text_layer(store.active_screen_id)
        path = storage.save("launch", store.snapshot())

        assert path.name == "launch" + COMPOSITION_EXTENSION
        assert storage.exists("launch")
        assert storage.load("launch") == store.snapshot()

    def test_save_overwrites(self, storage, store):
        """同名保存覆盖."""
        storage.save("launch", store.snapshot())
        store.add_screen()
        storage.save("launch", store.snapshot())
        assert len(storage.load("launch").screens) == 2

    def test_load_missing_raises(self, storage):
        """加载不存在的作品报错."""
        with pytest.raises(CompositionLoadError):
            storage.load("missing")

    def test_load_malformed_raises(self, storage):
        """加载损坏的文件报错."""
        storage.path_for("broken").write_text("{oops", encoding="utf-8")
        with pytest.raises(CompositionLoadError):
            storage.load("broken")

    def test_delete(self, storage, store):
        """删除作品."""
        storage.save("launch", store.snapshot())
        assert storage.delete("launch") is True
        assert storage.exists("launch") is False
        assert storage.delete("launch") is False

    def test_list_skips_bad_files(self, storage, store):
        """列表跳过无法读取的文件."""
        store.add_text_layer(store.active_screen_id)
        storage.save("good", store.snapshot())
        storage.path_for("bad").write_text("[]", encoding="utf-8")

        items = storage.list_compositions()

        assert [item.name for item in items] == ["good"]
        assert items[0].screen_count == 1
        assert items[0].layer_count == 1
