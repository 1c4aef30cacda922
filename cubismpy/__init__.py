"""
cubismpy

Live2D Cubism 原生引擎的 Python 绑定层：模型句柄、表情淡出、动作回调与框架生命周期。
"""

from cubismpy.version import __version__
from cubismpy.framework import (
    clear_buffer,
    dispose,
    gl_init,
    gl_release,
    glew_init,
    init,
    is_initialized,
    log_enable,
    set_log_enable,
)
from cubismpy.core import Model, Parameter, ParameterType, StandardParams

# live2d-py 脚本习惯称模型为 LAppModel
LAppModel = Model

__all__ = [
    "LAppModel",
    "Model",
    "Parameter",
    "ParameterType",
    "StandardParams",
    "__version__",
    "clear_buffer",
    "dispose",
    "gl_init",
    "gl_release",
    "glew_init",
    "init",
    "is_initialized",
    "log_enable",
    "set_log_enable",
]
