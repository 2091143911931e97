"""自定义异常类."""

from __future__ import annotations


class AppException(Exception):
    """应用基础异常类.

    所有自定义异常都应继承此类。

    Attributes:
        message: 错误消息
        code: 错误代码
    """

    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        """初始化异常.

        Args:
            message: 错误消息
            code: 错误代码
        """
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        """返回异常字符串表示."""
        return f"[{self.code}] {self.message}"


# ===================
# 配置相关异常
# ===================
class ConfigError(AppException):
    """配置错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_ERROR")


# ===================
# 模板相关异常
# ===================
class TemplateError(AppException):
    """模板错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "TEMPLATE_ERROR")


class TemplateNotFoundError(TemplateError):
    """模板未找到异常."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"模板未找到: {template_id}")


# ===================
# 作品相关异常
# ===================
class CompositionError(AppException):
    """作品数据错误异常."""

    def __init__(self, message: str, code: str = "COMPOSITION_ERROR") -> None:
        super().__init__(message, code)


class SnapshotFormatError(CompositionError):
    """作品快照格式错误异常."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"作品快照格式无效: {reason}", "SNAPSHOT_FORMAT_ERROR")


class CompositionLoadError(CompositionError):
    """作品加载失败异常."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        msg = f"无法加载作品: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, "COMPOSITION_LOAD_ERROR")
