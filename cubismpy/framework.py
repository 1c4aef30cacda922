"""进程级引擎生命周期：启动/关闭、GL 辅助函数与日志开关"""

from __future__ import annotations

from typing import Any

from cubismpy.config.settings import CubismLogLevel, Settings, load_settings
from cubismpy.engine import create_backend
from cubismpy.engine.base import NativeFramework, NativeModel
from cubismpy.utils.exceptions import FrameworkNotInitializedError
from cubismpy.utils.logger import get_logger
from cubismpy.utils.validation import ensure_bool, ensure_unit_float

logger = get_logger(__name__)
_engine_logger = get_logger("cubismpy.engine")

# 每次引擎日志调用都会读取；默认开启
_log_enable: bool = True

_backend: NativeFramework | None = None


def set_log_enable(enable: bool) -> None:
    global _log_enable
    _log_enable = ensure_bool("enable", enable)
    if _backend is not None:
        _backend.set_log_enable(_log_enable)


def log_enable() -> bool:
    return _log_enable


def engine_log(message: str) -> None:
    """启动时交给引擎的日志回调"""
    if _log_enable:
        _engine_logger.info(message)


def engine_info(message: str, *args: Any) -> None:
    if _log_enable:
        _engine_logger.info(message, *args)


def is_initialized() -> bool:
    return _backend is not None


def current_backend() -> NativeFramework:
    if _backend is None:
        raise FrameworkNotInitializedError()
    return _backend


def init(settings: Settings | None = None, backend: NativeFramework | None = None) -> NativeFramework:
    """启动 Cubism Framework；已在运行时重复调用不做任何事"""
    global _backend

    if _backend is not None:
        logger.debug("framework already initialized (backend=%s)", _backend.name)
        return _backend

    settings = settings or load_settings()
    set_log_enable(settings.log.engine_log_enable)

    framework = backend or create_backend(settings.framework.backend)
    level = settings.framework.log_level
    framework.startup(engine_log, int(level))
    # OFF 级别下不再由开关重新打开引擎日志
    framework.set_log_enable(_log_enable and level < CubismLogLevel.OFF)
    _backend = framework
    logger.info(
        "Cubism framework started: backend=%s log_level=%s",
        framework.name,
        settings.framework.log_level.name,
    )
    return framework


def dispose() -> None:
    global _backend

    if _backend is None:
        return
    framework, _backend = _backend, None
    framework.shutdown()
    logger.info("Cubism framework disposed: backend=%s", framework.name)


def gl_init() -> None:
    current_backend().gl_init()


# 旧版 live2d-py 脚本调用 glewInit()，保留该名字
glew_init = gl_init


def gl_release() -> None:
    current_backend().gl_release()


def clear_buffer(r: float = 0.0, g: float = 0.0, b: float = 0.0, a: float = 0.0) -> None:
    """清空颜色与深度缓冲，默认全透明黑"""
    rgba = (
        ensure_unit_float("r", r),
        ensure_unit_float("g", g),
        ensure_unit_float("b", b),
        ensure_unit_float("a", a),
    )
    current_backend().clear_buffer(*rgba)


def create_native_model() -> NativeModel:
    return current_backend().create_model()
