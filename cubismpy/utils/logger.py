"""
日志工具模块

目标：
- 控制台 + 文件双通道输出，文件自动轮转与保留
- 标准库 logging 统一汇入 loguru，格式与上下文一致
- 支持上下文绑定（如 motion_group/motion_no），方便排查引擎回调
"""

from __future__ import annotations

import logging
import os
import sys
import warnings
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Dict, List, Optional

from loguru import logger as loguru_logger

DEFAULT_LEVEL = os.getenv("CUBISMPY_LOG_LEVEL", "INFO")
DEFAULT_LOG_DIR = Path(os.getenv("CUBISMPY_LOG_DIR", "logs"))
DEFAULT_LOG_FILE = os.getenv("CUBISMPY_LOG_FILE", "cubismpy.log")
DEFAULT_JSON_FILE = os.getenv("CUBISMPY_JSON_LOG_FILE", "cubismpy.jsonl")
DEFAULT_ROTATION = os.getenv("CUBISMPY_LOG_ROTATION", "20 MB")
DEFAULT_RETENTION = os.getenv("CUBISMPY_LOG_RETENTION", "7 days")

# The console sink always writes to the original stream, even if a host
# application swaps sys.stderr later.
_ORIG_STDERR: IO[str] = sys.stderr
DEFAULT_QUIET_LIBS = [
    "OpenGL",
    "PyQt6",
    "asyncio",
]
DEFAULT_QUIET_LEVEL = os.getenv("CUBISMPY_LOG_QUIET_LEVEL", "WARNING")

LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})
_loguru_base = None
_current_config: "LoggerConfig" | None = None


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() not in {"0", "false", "no", "off"}


@dataclass
class LoggerConfig:
    """日志配置容器"""

    level: str = DEFAULT_LEVEL
    log_dir: Path = DEFAULT_LOG_DIR
    log_file: str = DEFAULT_LOG_FILE
    json_file: str = DEFAULT_JSON_FILE
    rotation: str = DEFAULT_ROTATION
    retention: str = DEFAULT_RETENTION
    enable_file: bool = _env_flag("CUBISMPY_LOG_TO_FILE", True)
    enable_json: bool = _env_flag("CUBISMPY_LOG_JSON", False)
    colorize: bool = _env_flag("CUBISMPY_LOG_COLOR", True)
    enqueue: bool = _env_flag("CUBISMPY_LOG_ENQUEUE", False)
    backtrace: bool = _env_flag("CUBISMPY_LOG_BACKTRACE", False)
    diagnose: bool = _env_flag("CUBISMPY_LOG_DIAGNOSE", False)
    capture_warnings: bool = _env_flag("CUBISMPY_CAPTURE_WARNINGS", True)
    extra: Dict[str, Any] = field(default_factory=dict)
    quiet_libs: List[str] = field(default_factory=lambda: list(DEFAULT_QUIET_LIBS))
    quiet_level: str = DEFAULT_QUIET_LEVEL

    def normalized_level(self) -> str:
        return str(self.level).upper()


class _LegacyLoggerAdapter:
    """
    兼容标准 logging `%s` 风格与 exc_info 语义，调用方无需关心底层是 loguru
    """

    __slots__ = ("_logger",)

    def __init__(self, logger):
        self._logger = logger

    @staticmethod
    def _format_message(message: Any, args: tuple[Any, ...]) -> str:
        if not args:
            return str(message)
        try:
            return str(message) % args
        except (TypeError, ValueError):
            joined = " ".join(str(arg) for arg in args)
            return f"{message} {joined}"

    def _log(self, method: str, message: Any, *args: Any, **kwargs: Any) -> None:
        level_name = "ERROR" if method == "exception" else method.upper()

        exc_info = kwargs.pop("exc_info", None)
        extra = kwargs.pop("extra", None)

        # 修复：调用位置（function/line）应指向业务代码，而不是本适配器。
        opt_kwargs: Dict[str, Any] = {"depth": 2}
        if exc_info:
            opt_kwargs["exception"] = True if exc_info is True else exc_info
        target = self._logger.opt(**opt_kwargs)
        if isinstance(extra, dict) and extra:
            target = target.bind(**extra)

        target.log(level_name, self._format_message(message, args))

    def bind(self, **kwargs: Any) -> "_LegacyLoggerAdapter":
        return _LegacyLoggerAdapter(self._logger.bind(**kwargs))

    def debug(self, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log("debug", message, *args, **kwargs)

    def info(self, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log("info", message, *args, **kwargs)

    def warning(self, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log("warning", message, *args, **kwargs)

    def error(self, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log("error", message, *args, **kwargs)

    def exception(self, message: Any, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._log("exception", message, *args, **kwargs)

    def critical(self, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log("critical", message, *args, **kwargs)

    def log(self, level: str, message: Any, *args: Any, **kwargs: Any) -> None:
        self._log(level.lower(), message, *args, **kwargs)


class _InterceptHandler(logging.Handler):
    """把标准 logging 流量引导到 loguru，保证日志口径统一"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 0
        while frame:
            filename = frame.f_code.co_filename
            is_logging = filename == logging.__file__
            is_frozen = "importlib" in filename and "_bootstrap" in filename
            if depth > 0 and not (is_logging or is_frozen):
                break
            frame = frame.f_back
            depth += 1

        target = _loguru_base or loguru_logger
        target.bind(logger_name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _format_context(context: Dict[str, Any]) -> str:
    if not context:
        return ""
    return " ".join(f"{k}={v}" for k, v in context.items())


def _inject_context(record: Dict[str, Any]) -> None:
    context = LOG_CONTEXT.get({})
    extra = record["extra"]
    merged = {**context, **extra.get("context", {})} if isinstance(context, dict) else {}
    extra["context"] = merged
    extra["context_str"] = _format_context(merged)
    extra.setdefault("logger_name", record.get("name") or "cubismpy")


def _merge_config(config: Optional[LoggerConfig], overrides: Dict[str, Any]) -> LoggerConfig:
    base = config or _current_config or LoggerConfig()
    merged = {**base.__dict__, **{k: v for k, v in overrides.items() if v is not None}}
    merged["log_dir"] = Path(merged["log_dir"])
    merged["level"] = str(merged["level"]).upper()
    merged["quiet_level"] = str(merged.get("quiet_level", DEFAULT_QUIET_LEVEL)).upper()
    if overrides.get("quiet_libs") is not None:
        merged["quiet_libs"] = list(overrides["quiet_libs"])
    return LoggerConfig(**merged)


def setup_logger(config: Optional[LoggerConfig] = None, **overrides: Any) -> _LegacyLoggerAdapter:
    """
    初始化/重置日志系统，可重复调用以应用新配置
    """
    global _loguru_base, _current_config

    cfg = _merge_config(config, overrides)
    _current_config = cfg

    loguru_logger.remove()
    loguru_logger.configure(patcher=_inject_context)
    _loguru_base = loguru_logger.bind(app="cubismpy", **cfg.extra)

    _loguru_base.add(
        _ORIG_STDERR,
        level=cfg.normalized_level(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[logger_name]}</cyan> | "
            "<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> {extra[context_str]}"
        ),
        colorize=cfg.colorize,
        enqueue=cfg.enqueue,
        backtrace=cfg.backtrace,
        diagnose=cfg.diagnose,
    )

    if cfg.enable_file:
        cfg.log_dir.mkdir(parents=True, exist_ok=True)
        _loguru_base.add(
            cfg.log_dir / cfg.log_file,
            level=cfg.normalized_level(),
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
                "{extra[logger_name]} | {function}:{line} | {message} {extra[context_str]}"
            ),
            rotation=cfg.rotation,
            retention=cfg.retention,
            encoding="utf-8",
            enqueue=cfg.enqueue,
            backtrace=cfg.backtrace,
            diagnose=cfg.diagnose,
        )

        if cfg.enable_json:
            _loguru_base.add(
                cfg.log_dir / cfg.json_file,
                level=cfg.normalized_level(),
                rotation=cfg.rotation,
                retention=cfg.retention,
                encoding="utf-8",
                enqueue=cfg.enqueue,
                serialize=True,
            )

    logging.basicConfig(
        handlers=[_InterceptHandler()],
        level=getattr(logging, cfg.normalized_level(), logging.INFO),
        force=True,
    )
    if cfg.capture_warnings:
        logging.captureWarnings(True)
        warnings.simplefilter("default", DeprecationWarning)

    # 压低第三方库噪声
    for name in cfg.quiet_libs:
        logging.getLogger(name).setLevel(cfg.quiet_level)
    return _LegacyLoggerAdapter(_loguru_base.bind(logger_name="cubismpy"))


def apply_settings(settings: Any) -> None:
    """根据 Settings 实例动态刷新日志配置"""
    log_cfg = getattr(settings, "log", None)
    if log_cfg is None:
        return
    setup_logger(
        level=log_cfg.level,
        log_dir=Path(log_cfg.dir),
        rotation=log_cfg.rotation,
        retention=log_cfg.retention,
        enable_file=log_cfg.to_file,
        enable_json=log_cfg.json_sink,
    )


def bind_context(**kwargs: Any) -> None:
    """绑定全局上下文"""
    updated = LOG_CONTEXT.get({}).copy()
    updated.update(kwargs)
    LOG_CONTEXT.set(updated)


@contextmanager
def log_context(**kwargs: Any):
    """上下文管理器版的 bind_context"""
    token = LOG_CONTEXT.set({**LOG_CONTEXT.get({}), **kwargs})
    try:
        yield
    finally:
        LOG_CONTEXT.reset(token)


def clear_context() -> None:
    """清理已绑定的上下文"""
    LOG_CONTEXT.set({})


def get_logger(name: str) -> _LegacyLoggerAdapter:
    """获取带模块名的 logger"""
    if _loguru_base is not None:
        return _LegacyLoggerAdapter(_loguru_base.bind(logger_name=name))
    return _LegacyLoggerAdapter(loguru_logger.bind(logger_name=name))


# 初始化默认日志，确保早期导入也有输出
logger = setup_logger()
