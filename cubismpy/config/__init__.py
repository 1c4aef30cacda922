"""
配置管理模块

提供日志、引擎框架、模型默认值与预览窗口的配置。
"""

from .settings import (
    CubismLogLevel,
    FrameworkConfig,
    LogConfig,
    ModelConfig,
    Settings,
    ViewerConfig,
    clear_settings_cache,
    load_settings,
)

__all__ = [
    "CubismLogLevel",
    "FrameworkConfig",
    "LogConfig",
    "ModelConfig",
    "Settings",
    "ViewerConfig",
    "clear_settings_cache",
    "load_settings",
]
