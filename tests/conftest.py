"""Pytest 配置和共享 fixtures."""

import pytest

from appshot.core.composition_store import CompositionStore
from appshot.models.layout_template import LayoutContent


@pytest.fixture
def store() -> CompositionStore:
    """返回只有一个空白屏幕的作品仓库."""
    return CompositionStore()


@pytest.fixture
def sample_content() -> LayoutContent:
    """返回示例版式内容."""
    return LayoutContent(
        screenshot="https://example.com/shot.png",
        headline="Track Spend",
        subtitle="Every coffee counts",
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """把应用设置隔离到临时目录."""
    from appshot.core.config_manager import get_config

    monkeypatch.setenv("APPSHOT_COMPOSITIONS_DIR", str(tmp_path / "compositions"))
    get_config().reload()
    yield
    get_config().reload()
