"""
cubismpy 自定义异常类

提供统一的异常处理机制，增强错误信息和调试能力。
"""

from typing import Any, Dict, Optional


class CubismPyException(Exception):
    """cubismpy 基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        初始化异常

        Args:
            message: 错误消息
            error_code: 错误代码
            context: 错误上下文信息
        """
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """返回格式化的错误信息"""
        error_str = f"[{self.error_code}] {self.message}"
        if self.context:
            error_str += f" | Context: {self.context}"
        return error_str

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }


class ConfigurationError(CubismPyException):
    """配置错误"""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIG_ERROR", context)


class InvalidArgumentError(CubismPyException, TypeError):
    """参数类型/数量错误（同时是 TypeError，便于调用方按内置语义捕获）"""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if argument:
            ctx["argument"] = argument
        super().__init__(message, "INVALID_ARGUMENT", ctx)


class ArgumentRangeError(CubismPyException, ValueError):
    """参数取值超出范围"""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if argument:
            ctx["argument"] = argument
        super().__init__(message, "ARGUMENT_OUT_OF_RANGE", ctx)


class EngineError(CubismPyException):
    """原生引擎相关错误"""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error_code: str = "ENGINE_ERROR",
    ):
        ctx = context or {}
        if backend:
            ctx["backend"] = backend
        super().__init__(message, error_code, ctx)


class EngineUnavailableError(EngineError):
    """引擎后端不可用（未安装或无法加载）"""

    def __init__(
        self,
        message: str,
        backend: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, backend, context, error_code="ENGINE_UNAVAILABLE")


class FrameworkNotInitializedError(EngineError):
    """在 init() 之前访问了框架"""

    def __init__(self, message: str = "framework is not initialized; call cubismpy.init() first"):
        super().__init__(message, error_code="FRAMEWORK_NOT_INITIALIZED")


class ModelDisposedError(CubismPyException):
    """模型已释放后仍被调用"""

    def __init__(self, operation: str):
        super().__init__(
            f"model already disposed, cannot call {operation}()",
            "MODEL_DISPOSED",
            {"operation": operation},
        )


def handle_exception(
    exception: Exception,
    logger: Any,
    user_message: str = "operation failed",
    log_traceback: bool = True,
) -> str:
    """
    统一的异常处理函数：记录日志并返回给调用方的提示消息

    Args:
        exception: 异常对象
        logger: 日志记录器
        user_message: 用户友好的错误消息
        log_traceback: 是否记录完整堆栈
    """
    if isinstance(exception, CubismPyException):
        logger.error("cubismpy error: %s", exception, exc_info=exception if log_traceback else None)
    else:
        logger.error(
            "unexpected error: %s: %s",
            type(exception).__name__,
            exception,
            exc_info=exception if log_traceback else None,
        )
    return user_message
