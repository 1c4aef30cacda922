"""
模型与框架入口共用的参数校验

所有校验都在转发给引擎之前完成，被拒绝的调用不会留下半截状态。
"""

from __future__ import annotations

from typing import Any, Callable

from cubismpy.utils.exceptions import ArgumentRangeError, InvalidArgumentError


def _type_name(value: Any) -> str:
    return type(value).__name__


def ensure_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{name} must be str, got {_type_name(value)}", argument=name)
    return value


def ensure_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be int, got {_type_name(value)}", argument=name)
    return value


def ensure_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be a number, got {_type_name(value)}", argument=name)
    return float(value)


def ensure_unit_float(name: str, value: Any) -> float:
    """取值在 [0, 1] 内的数（颜色通道、清屏色）"""
    number = ensure_float(name, value)
    if not 0.0 <= number <= 1.0:
        raise ArgumentRangeError(f"{name} must be within [0, 1], got {number}", argument=name)
    return number


def ensure_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise InvalidArgumentError(f"{name} must be bool, got {_type_name(value)}", argument=name)


def ensure_handler(name: str, value: Any) -> Callable[..., Any] | None:
    """None 表示不设回调，其它值必须可调用"""
    if value is None:
        return None
    if not callable(value):
        raise InvalidArgumentError("handler must be callable or None", argument=name)
    return value
