"""
模型核心

Model 句柄、表情淡出控制器与动作回调桥。
"""

from .expression import ExpressionFadeController, FadeTransition, wall_clock_ms
from .model import Model
from .motion import CallerContext, MotionCallbackBridge, MotionRegistration
from .params import Parameter, ParameterType, StandardParams

__all__ = [
    "CallerContext",
    "ExpressionFadeController",
    "FadeTransition",
    "Model",
    "MotionCallbackBridge",
    "MotionRegistration",
    "Parameter",
    "ParameterType",
    "StandardParams",
    "wall_clock_ms",
]
