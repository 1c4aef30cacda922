"""
应用配置类

使用 Pydantic 进行配置管理，支持从 YAML 配置文件加载。
基于 cubismpy.user.yaml + cubismpy.dev.yaml 的合并配置方案。
"""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from cubismpy.config.config_files import (
    DEFAULT_DEV_CONFIG_PATH,
    DEFAULT_USER_CONFIG_EXAMPLE_PATH,
    DEFAULT_USER_CONFIG_PATH,
    deep_merge_dict,
    read_yaml_file,
    resolve_config_paths,
    to_config_path,
    write_yaml_atomic,
)
from cubismpy.utils.exceptions import ConfigurationError
from cubismpy.utils.logger import get_logger

logger = get_logger(__name__)


class CubismLogLevel(IntEnum):
    """Cubism Framework 日志级别（数值与原生 LogLevel 一致）"""

    VERBOSE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    OFF = 5


# ==================== 日志配置模型 ====================


class LogConfig(BaseModel):
    """日志配置"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    level: str = Field(default="INFO", description="日志级别")
    dir: str = Field(default="logs", description="日志目录")
    rotation: str = Field(default="20 MB", description="日志轮转大小")
    retention: str = Field(default="7 days", description="日志保留时长")
    to_file: bool = Field(default=True, description="是否写入日志文件")
    json_sink: bool = Field(
        default=False,
        description="是否额外输出 JSONL 日志",
        validation_alias=AliasChoices("json_sink", "json"),
    )
    engine_log_enable: bool = Field(
        default=True,
        description="引擎日志开关（进程级，等价于 set_log_enable）",
        validation_alias=AliasChoices("engine_log_enable", "engine_log"),
    )

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = str(value).upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


# ==================== 引擎框架配置模型 ====================


class FrameworkConfig(BaseModel):
    """Cubism Framework 启动参数"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    backend: str = Field(default="live2d-py", description="原生引擎后端名称")
    log_level: CubismLogLevel = Field(
        default=CubismLogLevel.VERBOSE,
        description="引擎日志详细程度",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.isdigit():
            try:
                return CubismLogLevel[value.strip().upper()]
            except KeyError as exc:
                raise ValueError(f"unknown framework log level: {value}") from exc
        return value


# ==================== 模型配置 ====================


class ModelConfig(BaseModel):
    """模型默认行为"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    random_motion_priority: int = Field(default=3, ge=0, description="随机动作默认优先级")
    auto_breath: bool = Field(default=True, description="是否开启自动呼吸")
    auto_blink: bool = Field(default=True, description="是否开启自动眨眼")


# ==================== 预览窗口配置 ====================


class ViewerConfig(BaseModel):
    """预览窗口配置"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    model_json: Optional[str] = Field(default=None, description="model3.json 路径")
    width: int = Field(default=400, ge=1)
    height: int = Field(default=600, ge=1)
    fps: int = Field(default=30, ge=1, le=240)
    clear_color: Tuple[float, float, float, float] = Field(default=(0.0, 0.0, 0.0, 0.0))

    @field_validator("clear_color")
    @classmethod
    def _check_clear_color(cls, value: Tuple[float, float, float, float]):
        if any(c < 0.0 or c > 1.0 for c in value):
            raise ValueError("clear_color channels must be within [0, 1]")
        return value


class Settings(BaseModel):
    """cubismpy 全局配置"""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    log: LogConfig = Field(default_factory=LogConfig, validation_alias=AliasChoices("log", "Log"))
    framework: FrameworkConfig = Field(
        default_factory=FrameworkConfig,
        validation_alias=AliasChoices("framework", "Framework"),
    )
    model: ModelConfig = Field(
        default_factory=ModelConfig,
        validation_alias=AliasChoices("model", "Model"),
    )
    viewer: ViewerConfig = Field(
        default_factory=ViewerConfig,
        validation_alias=AliasChoices("viewer", "Viewer"),
    )

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Settings":
        """从字典构建配置，校验失败时抛出 ConfigurationError"""
        try:
            return cls.model_validate(config_data or {})
        except ValidationError as exc:
            raise ConfigurationError(
                "invalid cubismpy configuration",
                context={"errors": exc.errors(include_url=False)},
            ) from exc

    @classmethod
    def from_yaml(cls, config_path: str = DEFAULT_USER_CONFIG_PATH) -> "Settings":
        """从单个 YAML 文件加载配置"""
        path = to_config_path(config_path)
        if not path.exists():
            raise ConfigurationError(f"配置文件不存在: {path}", context={"path": str(path)})
        try:
            data = read_yaml_file(path)
        except (ValueError, yaml.YAMLError) as exc:
            raise ConfigurationError(str(exc), context={"path": str(path)}) from exc
        return cls.from_dict(data)

    def to_yaml(self, output_path: str) -> None:
        """保存配置到 YAML 文件"""
        write_yaml_atomic(output_path, self.model_dump(mode="json"))
        logger.info("配置已保存到: %s", output_path)

    def ensure_directories(self) -> None:
        if self.log.to_file:
            Path(self.log.dir).mkdir(parents=True, exist_ok=True)


_settings_cache: Settings | None = None
_settings_cache_key: tuple | None = None


def load_settings(
    user_config_path: str = DEFAULT_USER_CONFIG_PATH,
    dev_config_path: str = DEFAULT_DEV_CONFIG_PATH,
    use_cache: bool = True,
) -> Settings:
    """
    加载配置（带缓存）

    Args:
        user_config_path: 用户配置文件路径（默认 cubismpy.user.yaml）
        dev_config_path: 开发者配置文件路径（默认 cubismpy.dev.yaml；可选）
        use_cache: 文件未变化时复用上次结果

    Returns:
        Settings: 配置实例
    """
    global _settings_cache, _settings_cache_key

    user_path, dev_path = resolve_config_paths(
        user_config_path=user_config_path,
        dev_config_path=dev_config_path,
    )

    def _mtime_ns(path: Path | None) -> int | None:
        if path is None:
            return None
        try:
            return path.stat().st_mtime_ns
        except FileNotFoundError:
            return None

    cache_key = (
        str(user_path),
        str(dev_path) if dev_path is not None else "",
        _mtime_ns(user_path),
        _mtime_ns(dev_path),
    )

    if use_cache and _settings_cache is not None and _settings_cache_key == cache_key:
        logger.debug("配置缓存命中: user=%s dev=%s", user_path, dev_path)
        return _settings_cache

    user_data: Dict[str, Any] = {}
    if user_path.exists():
        try:
            user_data = read_yaml_file(user_path)
        except (ValueError, yaml.YAMLError) as exc:
            raise ConfigurationError(str(exc), context={"path": str(user_path)}) from exc
    elif user_config_path == DEFAULT_USER_CONFIG_PATH:
        logger.debug(
            "未找到 %s，使用默认配置（可参考 %s）",
            DEFAULT_USER_CONFIG_PATH,
            DEFAULT_USER_CONFIG_EXAMPLE_PATH,
        )
    else:
        raise ConfigurationError(f"配置文件不存在: {user_path}", context={"path": str(user_path)})

    dev_data: Dict[str, Any] = {}
    if dev_path is not None:
        try:
            dev_data = read_yaml_file(dev_path)
        except (ValueError, yaml.YAMLError) as exc:
            logger.warning("开发者配置文件读取失败，将忽略: %s (%s)", dev_path, exc)

    settings_instance = Settings.from_dict(deep_merge_dict(user_data, dev_data))

    if use_cache:
        _settings_cache = settings_instance
        _settings_cache_key = cache_key

    return settings_instance


def clear_settings_cache() -> None:
    global _settings_cache, _settings_cache_key
    _settings_cache = None
    _settings_cache_key = None
