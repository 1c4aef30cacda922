"""
原生引擎后端

``create_backend(name)`` 按名称构造 ``NativeFramework``。
"""

from __future__ import annotations

from typing import Callable, Dict

from cubismpy.engine.base import NativeFramework, NativeModel
from cubismpy.engine.live2d_py import BACKEND_NAME as LIVE2D_PY_BACKEND
from cubismpy.engine.live2d_py import Live2DPyFramework, Live2DPyModel
from cubismpy.utils.exceptions import EngineUnavailableError

_BACKENDS: Dict[str, Callable[[], NativeFramework]] = {
    LIVE2D_PY_BACKEND: Live2DPyFramework,
}


def register_backend(name: str, factory: Callable[[], NativeFramework]) -> None:
    _BACKENDS[name] = factory


def create_backend(name: str) -> NativeFramework:
    try:
        factory = _BACKENDS[name]
    except KeyError:
        raise EngineUnavailableError(
            f"unknown engine backend: {name}",
            backend=name,
            context={"available": sorted(_BACKENDS)},
        ) from None
    return factory()


__all__ = [
    "LIVE2D_PY_BACKEND",
    "Live2DPyFramework",
    "Live2DPyModel",
    "NativeFramework",
    "NativeModel",
    "create_backend",
    "register_backend",
]
