"""应用商店截图多屏编辑器."""

from appshot.utils.constants import APP_VERSION

__version__ = APP_VERSION
