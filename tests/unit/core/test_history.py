"""撤销/重做单元测试."""

import pytest

from appshot.core.history import EditHistory


@pytest.fixture
def history(store) -> EditHistory:
    """绑定空白仓库的编辑历史."""
    return EditHistory(store)


class TestEditHistory:
    """测试编辑历史."""

    def test_initial_state(self, history):
        """初始时无法撤销或重做."""
        assert history.can_undo is False
        assert history.can_redo is False
        assert history.undo() is False
        assert history.redo() is False

    def test_undo_restores_checkpoint(self, store, history):
        """撤销恢复到检查点."""
        history.checkpoint()
        store.add_text_layer(store.active_screen_id)
        assert history.undo() is True
        assert store.active_screen.layer_count == 0
        assert store.selected_layer_id is None

    def test_redo_reapplies_change(self, store, history):
        """重做恢复撤销前的状态."""
        history.checkpoint()
        layer_id = store.add_text_layer(store.active_screen_id)
        history.undo()
        assert history.redo() is True
        assert store.get_layer(layer_id) is not None
        assert store.selected_layer_id == layer_id

    def test_checkpoint_clears_redo(self, store, history):
        """新检查点清空重做栈."""
        history.checkpoint()
        store.add_screen()
        history.undo()
        assert history.can_redo
        history.checkpoint()
        assert history.can_redo is False

    def test_duplicate_checkpoint_is_skipped(self, history):
        """状态未变时不重复记录."""
        history.checkpoint()
        history.checkpoint()
        assert history.undo_count == 1

    def test_max_depth(self, store):
        """超过深度时丢弃最早的检查点."""
        history = EditHistory(store, max_depth=3)
        for _ in range(5):
            history.checkpoint()
            store.add_screen()
        assert history.undo_count == 3

    def test_listener_called(self, store, history):
        """栈状态变化时回调."""
        calls = []
        history.add_listener(calls.append)
        history.checkpoint()
        history.undo()
        assert calls == [history, history]

    def test_clear(self, store, history):
        """清空历史."""
        history.checkpoint()
        store.add_screen()
        history.clear()
        assert history.undo_count == 0
        assert history.redo_count == 0
