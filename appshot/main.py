"""应用商店截图多屏编辑器 - 应用入口."""

from __future__ import annotations

import sys


def main() -> int:
    """应用主入口函数.

    用法: ``appshot [作品名称] [提示词]``

    Returns:
        退出码，0 表示正常退出
    """
    from PyQt6.QtWidgets import QApplication

    from appshot.app import DEFAULT_COMPOSITION_NAME, Application
    from appshot.utils.constants import APP_AUTHOR, APP_NAME, APP_VERSION
    from appshot.utils.logger import setup_logger

    # 初始化日志
    logger = setup_logger(__name__)
    logger.info(f"启动{APP_NAME}")

    # 创建 Qt 应用
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName(APP_NAME)
    qt_app.setApplicationVersion(APP_VERSION)
    qt_app.setOrganizationName(APP_AUTHOR)

    args = qt_app.arguments()[1:]
    name = args[0] if args else DEFAULT_COMPOSITION_NAME
    prompt = args[1] if len(args) > 1 else None

    try:
        app = Application(name)
        app.initialize()
        app.show_editor(user_prompt=prompt)

        exit_code = qt_app.exec()
        logger.info(f"应用正常退出，退出码: {exit_code}")
        return exit_code

    except Exception as e:
        logger.exception(f"应用运行时发生错误: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
