"""配置管理器单元测试."""

from pathlib import Path

import pytest

from appshot.core.config_manager import ConfigManager, get_config
from appshot.utils.exceptions import ConfigError
from appshot.utils.logger import get_log_level_name


class TestConfigManager:
    """测试配置管理器."""

    def test_should_be_singleton(self):
        """应为单例."""
        assert ConfigManager() is ConfigManager()
        assert get_config() is ConfigManager()

    def test_should_load_settings_from_env(self, tmp_path):
        """应从环境变量加载设置."""
        assert get_config().settings.storage_dir == Path(tmp_path / "compositions")

    def test_reload_picks_up_changes(self, monkeypatch):
        """重新加载后读取新值."""
        config = get_config()
        assert config.settings.history_depth == 50
        monkeypatch.setenv("APPSHOT_HISTORY_DEPTH", "5")
        config.reload()
        assert config.settings.history_depth == 5

    def test_should_apply_log_level(self, monkeypatch):
        """加载设置时应用日志级别."""
        monkeypatch.setenv("APPSHOT_LOG_LEVEL", "WARNING")
        config = get_config()
        config.reload()
        try:
            config.settings
            assert get_log_level_name() == "WARNING"
        finally:
            monkeypatch.setenv("APPSHOT_LOG_LEVEL", "INFO")
            config.reload()
            config.settings

    def test_invalid_settings_raise_config_error(self, monkeypatch):
        """无效设置应抛出配置错误."""
        monkeypatch.setenv("APPSHOT_HISTORY_DEPTH", "0")
        config = get_config()
        config.reload()
        with pytest.raises(ConfigError):
            config.settings
