"""
工具模块

日志、异常等通用基础设施。
"""

from .exceptions import (
    ArgumentRangeError,
    ConfigurationError,
    CubismPyException,
    EngineError,
    EngineUnavailableError,
    FrameworkNotInitializedError,
    InvalidArgumentError,
    ModelDisposedError,
)
from .logger import get_logger, log_context, setup_logger

__all__ = [
    "ArgumentRangeError",
    "CubismPyException",
    "ConfigurationError",
    "EngineError",
    "EngineUnavailableError",
    "FrameworkNotInitializedError",
    "InvalidArgumentError",
    "ModelDisposedError",
    "get_logger",
    "log_context",
    "setup_logger",
]
