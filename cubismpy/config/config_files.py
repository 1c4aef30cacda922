from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULT_USER_CONFIG_PATH = "cubismpy.user.yaml"
DEFAULT_DEV_CONFIG_PATH = "cubismpy.dev.yaml"

DEFAULT_USER_CONFIG_EXAMPLE_PATH = "cubismpy.user.yaml.example"

CONFIG_DIR_ENV = "CUBISMPY_CONFIG_DIR"


def config_root() -> Path:
    """Directory relative config paths resolve against (env override, else cwd)."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return Path.cwd()


def to_config_path(path: str | Path) -> Path:
    value = Path(path)
    if value.is_absolute():
        return value
    return config_root() / value


def deep_merge_dict(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge dictionaries (override wins), without mutating inputs."""
    merged: dict[str, Any] = dict(base or {})
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge_dict(merged.get(key, {}), value)
        else:
            merged[key] = value
    return merged


def read_yaml_file(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"配置文件必须为 YAML mapping/object: {path}")

    return data


def resolve_config_paths(
    user_config_path: str = DEFAULT_USER_CONFIG_PATH,
    dev_config_path: str = DEFAULT_DEV_CONFIG_PATH,
) -> tuple[Path, Path | None]:
    """Return (user_path, dev_path_or_none)."""
    user_path = to_config_path(user_config_path)

    dev_path: Path | None = None
    if dev_config_path:
        candidate = to_config_path(dev_config_path)
        if candidate.exists():
            dev_path = candidate

    return user_path, dev_path


def write_yaml_atomic(path: str | Path, data: dict[str, Any]) -> None:
    output_path = to_config_path(path)
    tmp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        tmp_path.write_text(
            yaml.safe_dump(data, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        tmp_path.replace(output_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
