"""
模型句柄（脚本直接使用的对象）

大多数方法只做参数校验后转发给原生模型。例外是表情（经 ExpressionFadeController）
和动作（经 MotionCallbackBridge）。

模型由单个渲染线程驱动：每帧 update() 与 draw() 各一次，修改类调用穿插其间。
"""

from __future__ import annotations

import os
from typing import Any, List

from cubismpy import framework
from cubismpy.config.settings import ModelConfig
from cubismpy.core.expression import Clock, ExpressionFadeController
from cubismpy.core.motion import CallerContext, MotionCallbackBridge
from cubismpy.core.params import Parameter
from cubismpy.engine.base import RGBA, NativeModel
from cubismpy.utils.exceptions import ArgumentRangeError, ModelDisposedError
from cubismpy.utils.logger import get_logger
from cubismpy.utils.validation import (
    ensure_bool,
    ensure_float,
    ensure_int,
    ensure_str,
    ensure_unit_float,
)

logger = get_logger(__name__)


class Model:
    """Live2D 模型实例，以及绑定层为每个模型维护的状态"""

    def __init__(
        self,
        native: NativeModel | None = None,
        *,
        config: ModelConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config or ModelConfig()
        self._native: NativeModel | None = native if native is not None else framework.create_native_model()
        self._context = CallerContext()
        self._fade = ExpressionFadeController(self._native, clock=clock)
        self._motions = MotionCallbackBridge(self._context)
        framework.engine_info("[M] allocate model(at=%#x)", id(self._native))

    # -------------------------
    # 生命周期
    # -------------------------

    @property
    def native(self) -> NativeModel:
        return self._require("native")

    @property
    def disposed(self) -> bool:
        return self._native is None

    @property
    def expression_fade(self) -> ExpressionFadeController:
        return self._fade

    @property
    def motion_callbacks(self) -> MotionCallbackBridge:
        return self._motions

    @property
    def caller_context(self) -> CallerContext:
        return self._context

    def dispose(self) -> None:
        if self._native is None:
            return
        framework.engine_info("[M] deallocate model(at=%#x)", id(self._native))
        self._motions.clear()
        native, self._native = self._native, None
        native.release()

    def __enter__(self) -> "Model":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _require(self, operation: str) -> NativeModel:
        if self._native is None:
            raise ModelDisposedError(operation)
        return self._native

    # -------------------------
    # 加载 / 帧循环
    # -------------------------

    def load_model_json(self, path: Any) -> None:
        """加载 *.model3.json 及其资源，引擎异常原样抛出"""
        native = self._require("load_model_json")
        path = ensure_str("path", os.fspath(path) if isinstance(path, os.PathLike) else path)
        native.load_model_json(path)
        native.set_auto_breath_enable(self._config.auto_breath)
        native.set_auto_blink_enable(self._config.auto_blink)
        logger.debug("model loaded: %s", path)

    def resize(self, width: int, height: int) -> None:
        native = self._require("resize")
        native.resize(ensure_int("width", width), ensure_int("height", height))

    def update(self) -> None:
        native = self._require("update")
        try:
            self._fade.tick()
        finally:
            # 表情切换失败也要推进引擎帧
            native.update()

    def draw(self) -> None:
        self._require("draw").draw()

    # -------------------------
    # 动作
    # -------------------------

    def start_motion(
        self,
        group: str,
        no: int,
        priority: int,
        on_start: Any = None,
        on_finish: Any = None,
    ) -> None:
        """
        排入动作 group[no]

        on_start(group, no) 在动作开始播放时调用，on_finish() 在动作结束或被打断时调用。
        两者均可省略，各自最多调用一次，且都发生在之后的某次 update() 内。
        """
        native = self._require("start_motion")
        group = ensure_str("group", group)
        no = ensure_int("no", no)
        priority = ensure_int("priority", priority)
        registration = self._motions.register(on_start, on_finish, group=group, no=no)
        try:
            native.start_motion(group, no, priority, registration.on_start, registration.on_finish)
        except Exception:
            self._motions.discard(registration)
            raise

    def start_random_motion(
        self,
        group: str | None = None,
        priority: int | None = None,
        on_start: Any = None,
        on_finish: Any = None,
    ) -> None:
        native = self._require("start_random_motion")
        if group is not None:
            group = ensure_str("group", group)
        priority = (
            self._config.random_motion_priority if priority is None else ensure_int("priority", priority)
        )
        registration = self._motions.register(on_start, on_finish, group=group)
        try:
            native.start_random_motion(group, priority, registration.on_start, registration.on_finish)
        except Exception:
            self._motions.discard(registration)
            raise

    def stop_all_motions(self) -> None:
        self._require("stop_all_motions").stop_all_motions()

    def is_motion_finished(self) -> bool:
        return bool(self._require("is_motion_finished").is_motion_finished())

    def reset_pose(self) -> None:
        self._require("reset_pose").reset_pose()

    # -------------------------
    # 表情
    # -------------------------

    def set_expression(self, expression_id: str, fadeout: int | None = None) -> None:
        """设置表情；给出 fadeout（毫秒）时到时自动回退"""
        self._require("set_expression")
        expression_id = ensure_str("expression_id", expression_id)
        if fadeout is not None:
            fadeout = ensure_int("fadeout", fadeout)
        self._fade.set_expression(expression_id, fadeout)

    def set_random_expression(self) -> None:
        self._require("set_random_expression").set_random_expression()

    def reset_expression(self) -> None:
        self._require("reset_expression")
        self._fade.reset()

    # -------------------------
    # 交互
    # -------------------------

    def hit_test(self, x: float, y: float) -> str:
        """返回 (x, y) 处命中的区域名，未命中返回空字符串"""
        native = self._require("hit_test")
        return native.hit_test(ensure_float("x", x), ensure_float("y", y)) or ""

    def has_moc_consistency_from_file(self, moc_path: Any) -> bool:
        native = self._require("has_moc_consistency_from_file")
        moc_path = ensure_str(
            "moc_path", os.fspath(moc_path) if isinstance(moc_path, os.PathLike) else moc_path
        )
        return bool(native.has_moc_consistency_from_file(moc_path))

    def touch(self, x: float, y: float, on_start: Any = None, on_finish: Any = None) -> None:
        native = self._require("touch")
        x = ensure_float("x", x)
        y = ensure_float("y", y)
        registration = self._motions.register(on_start, on_finish)
        try:
            native.touch(x, y, registration.on_start, registration.on_finish)
        except Exception:
            self._motions.discard(registration)
            raise

    def drag(self, x: float, y: float) -> None:
        native = self._require("drag")
        native.drag(ensure_float("x", x), ensure_float("y", y))

    def set_offset(self, dx: float, dy: float) -> None:
        native = self._require("set_offset")
        native.set_offset(ensure_float("dx", dx), ensure_float("dy", dy))

    def set_scale(self, scale: float) -> None:
        self._require("set_scale").set_scale(ensure_float("scale", scale))

    def set_auto_breath_enable(self, enable: bool) -> None:
        self._require("set_auto_breath_enable").set_auto_breath_enable(ensure_bool("enable", enable))

    def set_auto_blink_enable(self, enable: bool) -> None:
        self._require("set_auto_blink_enable").set_auto_blink_enable(ensure_bool("enable", enable))

    # -------------------------
    # 参数
    # -------------------------

    def set_parameter_value(self, param_id: str, value: float, weight: float = 1.0) -> None:
        native = self._require("set_parameter_value")
        native.set_parameter_value(
            ensure_str("param_id", param_id),
            ensure_float("value", value),
            ensure_float("weight", weight),
        )

    def add_parameter_value(self, param_id: str, value: float) -> None:
        native = self._require("add_parameter_value")
        native.add_parameter_value(ensure_str("param_id", param_id), ensure_float("value", value))

    def get_parameter_count(self) -> int:
        return int(self._require("get_parameter_count").get_parameter_count())

    def get_parameter(self, index: int) -> Parameter:
        native = self._require("get_parameter")
        index = ensure_int("index", index)
        count = native.get_parameter_count()
        if not 0 <= index < count:
            raise ArgumentRangeError(
                f"parameter index {index} out of range (count={count})", argument="index"
            )
        pid, ptype, value, vmax, vmin, vdefault = native.get_parameter(index)
        return Parameter(
            id=pid, type=ptype, value=value, max=vmax, min=vmin, default=vdefault
        )

    def get_parameters(self) -> List[Parameter]:
        return [self.get_parameter(i) for i in range(self.get_parameter_count())]

    # -------------------------
    # 部件
    # -------------------------

    def get_part_count(self) -> int:
        return int(self._require("get_part_count").get_part_count())

    def _check_part_index(self, native: NativeModel, index: Any) -> int:
        index = ensure_int("index", index)
        count = native.get_part_count()
        if not 0 <= index < count:
            raise ArgumentRangeError(f"part index {index} out of range (count={count})", argument="index")
        return index

    def get_part_id(self, index: int) -> str:
        native = self._require("get_part_id")
        return native.get_part_id(self._check_part_index(native, index))

    def get_part_ids(self) -> List[str]:
        native = self._require("get_part_ids")
        return [native.get_part_id(i) for i in range(native.get_part_count())]

    def set_part_opacity(self, index: int, opacity: float) -> None:
        native = self._require("set_part_opacity")
        index = self._check_part_index(native, index)
        native.set_part_opacity(index, ensure_unit_float("opacity", opacity))

    def hit_part(self, x: float, y: float, top_only: bool = False) -> List[str]:
        """返回 (x, y) 处的部件 id；top_only 时只取最上层"""
        native = self._require("hit_part")
        return list(
            native.hit_part(ensure_float("x", x), ensure_float("y", y), ensure_bool("top_only", top_only))
        )

    def set_part_multiply_color(self, index: int, r: float, g: float, b: float, a: float) -> None:
        native = self._require("set_part_multiply_color")
        index = self._check_part_index(native, index)
        native.set_part_multiply_color(index, *_rgba(r, g, b, a))

    def get_part_multiply_color(self, index: int) -> RGBA:
        native = self._require("get_part_multiply_color")
        return tuple(native.get_part_multiply_color(self._check_part_index(native, index)))

    def set_part_screen_color(self, index: int, r: float, g: float, b: float, a: float) -> None:
        native = self._require("set_part_screen_color")
        index = self._check_part_index(native, index)
        native.set_part_screen_color(index, *_rgba(r, g, b, a))

    def get_part_screen_color(self, index: int) -> RGBA:
        native = self._require("get_part_screen_color")
        return tuple(native.get_part_screen_color(self._check_part_index(native, index)))


def _rgba(r: Any, g: Any, b: Any, a: Any) -> RGBA:
    return (
        ensure_unit_float("r", r),
        ensure_unit_float("g", g),
        ensure_unit_float("b", b),
        ensure_unit_float("a", a),
    )

