"""通过 live2d-py（live2d.v3）驱动 Cubism Native SDK 的后端"""

from __future__ import annotations

import importlib
import sys
from types import ModuleType
from typing import Any, Sequence

from cubismpy.engine.base import (
    RGBA,
    LogFunction,
    MotionFinishCallback,
    MotionStartCallback,
    RawParameter,
)
from cubismpy.utils.exceptions import EngineUnavailableError

BACKEND_NAME = "live2d-py"


def import_live2d_v3() -> ModuleType:
    """导入 live2d.v3；失败时抛出带安装提示的 EngineUnavailableError"""
    try:
        return importlib.import_module("live2d.v3")
    except ImportError as exc:
        hint = "未检测到 / 无法加载 live2d-py（Cubism Native SDK）。\n"
        hint += f"当前 Python: {sys.executable}\n"
        hint += "请在同一环境中安装：pip install -U live2d-py"
        raise EngineUnavailableError(hint, backend=BACKEND_NAME, context={"error": repr(exc)}) from exc


class Live2DPyModel:
    """基于 live2d.v3.LAppModel 的 NativeModel"""

    def __init__(self, model: Any) -> None:
        self._model = model

    @property
    def raw(self) -> Any:
        return self._model

    def load_model_json(self, path: str) -> None:
        self._model.LoadModelJson(path)
        # 新版 live2d-py 把 GPU 资源创建从加载中拆了出来
        if hasattr(self._model, "CreateRenderer"):
            self._model.CreateRenderer()

    def resize(self, width: int, height: int) -> None:
        self._model.Resize(width, height)

    def draw(self) -> None:
        self._model.Draw()

    def update(self) -> None:
        self._model.Update()

    def start_motion(
        self,
        group: str,
        no: int,
        priority: int,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> object:
        return self._model.StartMotion(
            group,
            no,
            priority,
            onStartMotionHandler=on_start,
            onFinishMotionHandler=on_finish,
        )

    def start_random_motion(
        self,
        group: str | None,
        priority: int,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> object:
        kwargs: dict[str, Any] = {
            "priority": priority,
            "onStartMotionHandler": on_start,
            "onFinishMotionHandler": on_finish,
        }
        # 绑定层以 "s" 解析 group，不接受 None；省略即表示任意分组
        if group is not None:
            kwargs["group"] = group
        return self._model.StartRandomMotion(**kwargs)

    def stop_all_motions(self) -> None:
        self._model.StopAllMotions()

    def reset_pose(self) -> None:
        self._model.ResetPose()

    def set_expression(self, expression_id: str) -> None:
        self._model.SetExpression(expression_id)

    def set_random_expression(self) -> None:
        self._model.SetRandomExpression()

    def reset_expression(self) -> None:
        self._model.ResetExpression()

    def hit_test(self, x: float, y: float) -> str:
        return str(self._model.HitTest(x, y) or "")

    def has_moc_consistency_from_file(self, moc_path: str) -> bool:
        return bool(self._model.HasMocConsistencyFromFile(moc_path))

    def touch(
        self,
        x: float,
        y: float,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> None:
        self._model.Touch(x, y, onStartMotionHandler=on_start, onFinishMotionHandler=on_finish)

    def drag(self, x: float, y: float) -> None:
        self._model.Drag(x, y)

    def is_motion_finished(self) -> bool:
        return bool(self._model.IsMotionFinished())

    def set_offset(self, dx: float, dy: float) -> None:
        self._model.SetOffset(dx, dy)

    def set_scale(self, scale: float) -> None:
        self._model.SetScale(scale)

    def set_auto_breath_enable(self, enable: bool) -> None:
        self._model.SetAutoBreathEnable(enable)

    def set_auto_blink_enable(self, enable: bool) -> None:
        self._model.SetAutoBlinkEnable(enable)

    def set_parameter_value(self, param_id: str, value: float, weight: float) -> None:
        self._model.SetParameterValue(param_id, value, weight)

    def add_parameter_value(self, param_id: str, value: float) -> None:
        self._model.AddParameterValue(param_id, value)

    def get_parameter_count(self) -> int:
        return int(self._model.GetParameterCount())

    def get_parameter(self, index: int) -> RawParameter:
        p = self._model.GetParameter(index)
        return (
            str(p.id),
            int(p.type),
            float(p.value),
            float(p.max),
            float(p.min),
            float(p.default),
        )

    def get_part_count(self) -> int:
        return int(self._model.GetPartCount())

    def get_part_id(self, index: int) -> str:
        return str(self._model.GetPartId(index))

    def set_part_opacity(self, index: int, opacity: float) -> None:
        self._model.SetPartOpacity(index, opacity)

    def hit_part(self, x: float, y: float, top_only: bool) -> Sequence[str]:
        return list(self._model.HitPart(x, y, top_only))

    def set_part_multiply_color(self, index: int, r: float, g: float, b: float, a: float) -> None:
        self._model.SetPartMultiplyColor(index, r, g, b, a)

    def get_part_multiply_color(self, index: int) -> RGBA:
        r, g, b, a = self._model.GetPartMultiplyColor(index)
        return (float(r), float(g), float(b), float(a))

    def set_part_screen_color(self, index: int, r: float, g: float, b: float, a: float) -> None:
        self._model.SetPartScreenColor(index, r, g, b, a)

    def get_part_screen_color(self, index: int) -> RGBA:
        r, g, b, a = self._model.GetPartScreenColor(index)
        return (float(r), float(g), float(b), float(a))

    def release(self) -> None:
        # LAppModel 在 Python 对象回收时释放原生资源
        self._model = None


class Live2DPyFramework:
    """基于 live2d.v3 模块函数的 NativeFramework"""

    name = BACKEND_NAME

    def __init__(self, module: ModuleType | None = None) -> None:
        self._module = module
        self._log_function: LogFunction | None = None

    @property
    def module(self) -> ModuleType:
        if self._module is None:
            self._module = import_live2d_v3()
        return self._module

    def startup(self, log_function: LogFunction, log_level: int) -> None:
        # live2d-py 自行打印引擎日志，只暴露开关
        self._log_function = log_function
        self.module.setLogEnable(log_level < 5)
        self.module.init()
        log_function(f"live2d-py framework started (log_level={log_level})")

    def shutdown(self) -> None:
        self.module.dispose()
        if self._log_function is not None:
            self._log_function("live2d-py framework disposed")

    def gl_init(self) -> None:
        mod = self.module
        if hasattr(mod, "glInit"):
            mod.glInit()
        else:
            mod.glewInit()

    def gl_release(self) -> None:
        if hasattr(self.module, "glRelease"):
            self.module.glRelease()

    def clear_buffer(self, r: float, g: float, b: float, a: float) -> None:
        self.module.clearBuffer(r, g, b, a)

    def set_log_enable(self, enable: bool) -> None:
        self.module.setLogEnable(enable)

    def create_model(self) -> Live2DPyModel:
        return Live2DPyModel(self.module.LAppModel())
