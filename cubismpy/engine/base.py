"""
原生 Cubism 引擎协议

每个后端提供一个 NativeFramework（进程级启动/关闭与 GL 辅助函数），由它创建
NativeModel 实例。动作回调是普通的可调用对象 on_start(group, no) 与 on_finish()，
由引擎在自身 update() 过程中调用。
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

MotionStartCallback = Callable[[str, int], object]
MotionFinishCallback = Callable[[], object]
LogFunction = Callable[[str], None]

# (id, 类型, 当前值, 最大值, 最小值, 默认值)
RawParameter = tuple[str, int, float, float, float, float]
RGBA = tuple[float, float, float, float]


@runtime_checkable
class NativeModel(Protocol):
    def load_model_json(self, path: str) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def draw(self) -> None: ...

    def update(self) -> None: ...

    def start_motion(
        self,
        group: str,
        no: int,
        priority: int,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> object: ...

    def start_random_motion(
        self,
        group: str | None,
        priority: int,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> object: ...

    def stop_all_motions(self) -> None: ...

    def reset_pose(self) -> None: ...

    def set_expression(self, expression_id: str) -> None: ...

    def set_random_expression(self) -> None: ...

    def reset_expression(self) -> None: ...

    def hit_test(self, x: float, y: float) -> str: ...

    def has_moc_consistency_from_file(self, moc_path: str) -> bool: ...

    def touch(
        self,
        x: float,
        y: float,
        on_start: MotionStartCallback | None,
        on_finish: MotionFinishCallback | None,
    ) -> None: ...

    def drag(self, x: float, y: float) -> None: ...

    def is_motion_finished(self) -> bool: ...

    def set_offset(self, dx: float, dy: float) -> None: ...

    def set_scale(self, scale: float) -> None: ...

    def set_auto_breath_enable(self, enable: bool) -> None: ...

    def set_auto_blink_enable(self, enable: bool) -> None: ...

    def set_parameter_value(self, param_id: str, value: float, weight: float) -> None: ...

    def add_parameter_value(self, param_id: str, value: float) -> None: ...

    def get_parameter_count(self) -> int: ...

    def get_parameter(self, index: int) -> RawParameter: ...

    def get_part_count(self) -> int: ...

    def get_part_id(self, index: int) -> str: ...

    def set_part_opacity(self, index: int, opacity: float) -> None: ...

    def hit_part(self, x: float, y: float, top_only: bool) -> Sequence[str]: ...

    def set_part_multiply_color(self, index: int, r: float, g: float, b: float, a: float) -> None: ...

    def get_part_multiply_color(self, index: int) -> RGBA: ...

    def set_part_screen_color(self, index: int, r: float, g: float, b: float, a: float) -> None: ...

    def get_part_screen_color(self, index: int) -> RGBA: ...

    def release(self) -> None: ...


@runtime_checkable
class NativeFramework(Protocol):
    name: str

    def startup(self, log_function: LogFunction, log_level: int) -> None: ...

    def shutdown(self) -> None: ...

    def gl_init(self) -> None: ...

    def gl_release(self) -> None: ...

    def clear_buffer(self, r: float, g: float, b: float, a: float) -> None: ...

    def set_log_enable(self, enable: bool) -> None: ...

    def create_model(self) -> NativeModel: ...
