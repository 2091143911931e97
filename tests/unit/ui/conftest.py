"""界面组件测试 fixtures."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="module")
def app():
    """创建 Qt 应用实例."""
    from PyQt6.QtWidgets import QApplication

    application = QApplication.instance()
    if not application:
        application = QApplication([])
    yield application
