"""
pytest 配置文件

提供假引擎（记录调用、模拟动作事件）、手动时钟和日志捕获等 fixtures。
"""

import os

# 测试期间不写日志文件、不着色（须在导入 cubismpy 之前设置）
os.environ.setdefault("CUBISMPY_LOG_TO_FILE", "0")
os.environ.setdefault("CUBISMPY_LOG_COLOR", "0")

import tempfile
from pathlib import Path

import pytest
from loguru import logger as loguru_logger

from cubismpy import framework
from cubismpy.config.settings import Settings, clear_settings_cache
from cubismpy.core.model import Model


class FakeNativeModel:
    """In-memory stand-in for the native model.

    Records every call in ``calls``. Motions are queued; ``play_next()`` and
    ``finish_current()`` fire the callbacks the way the engine does, and
    ``during_update`` hooks run from inside ``update()``.
    """

    def __init__(self, parts=None, params=None):
        self.calls = []
        self.queue = []
        self.current = None
        self.during_update = []
        self.parts = list(parts if parts is not None else ["PartHead", "PartBody", "PartArm"])
        self.params = list(
            params
            if params is not None
            else [
                ("ParamAngleX", 0, 0.0, 30.0, -30.0, 0.0),
                ("ParamEyeLOpen", 0, 1.0, 1.0, 0.0, 1.0),
            ]
        )
        self.multiply = {i: (1.0, 1.0, 1.0, 1.0) for i in range(len(self.parts))}
        self.screen = {i: (0.0, 0.0, 0.0, 1.0) for i in range(len(self.parts))}
        self.start_motion_error = None
        self.released = False

    def _record(self, name, *args):
        self.calls.append((name, *args))

    def names(self):
        return [c[0] for c in self.calls]

    # --- engine events -------------------------------------------------

    def play_next(self):
        group, no, on_start, on_finish = self.queue.pop(0)
        if self.current is not None:
            self.finish_current()
        self.current = (group, no, on_start, on_finish)
        if on_start is not None:
            on_start(group, no)

    def finish_current(self):
        current, self.current = self.current, None
        if current is not None and current[3] is not None:
            current[3]()

    # --- NativeModel ---------------------------------------------------

    def load_model_json(self, path):
        self._record("load_model_json", path)

    def resize(self, width, height):
        self._record("resize", width, height)

    def draw(self):
        self._record("draw")

    def update(self):
        self._record("update")
        hooks, self.during_update = self.during_update, []
        for hook in hooks:
            hook()

    def start_motion(self, group, no, priority, on_start, on_finish):
        self._record("start_motion", group, no, priority)
        if self.start_motion_error is not None:
            raise self.start_motion_error
        self.queue.append((group, no, on_start, on_finish))
        return len(self.queue)

    def start_random_motion(self, group, priority, on_start, on_finish):
        self._record("start_random_motion", group, priority)
        self.queue.append((group or "Idle", 0, on_start, on_finish))
        return len(self.queue)

    def stop_all_motions(self):
        self._record("stop_all_motions")

    def reset_pose(self):
        self._record("reset_pose")

    def set_expression(self, expression_id):
        self._record("set_expression", expression_id)

    def set_random_expression(self):
        self._record("set_random_expression")

    def reset_expression(self):
        self._record("reset_expression")

    def hit_test(self, x, y):
        self._record("hit_test", x, y)
        return "Head" if y < 100 else ""

    def has_moc_consistency_from_file(self, moc_path):
        self._record("has_moc_consistency_from_file", moc_path)
        return moc_path.endswith(".moc3")

    def touch(self, x, y, on_start, on_finish):
        self._record("touch", x, y)
        self.queue.append(("TapBody", 0, on_start, on_finish))

    def drag(self, x, y):
        self._record("drag", x, y)

    def is_motion_finished(self):
        self._record("is_motion_finished")
        return self.current is None and not self.queue

    def set_offset(self, dx, dy):
        self._record("set_offset", dx, dy)

    def set_scale(self, scale):
        self._record("set_scale", scale)

    def set_auto_breath_enable(self, enable):
        self._record("set_auto_breath_enable", enable)

    def set_auto_blink_enable(self, enable):
        self._record("set_auto_blink_enable", enable)

    def set_parameter_value(self, param_id, value, weight):
        self._record("set_parameter_value", param_id, value, weight)

    def add_parameter_value(self, param_id, value):
        self._record("add_parameter_value", param_id, value)

    def get_parameter_count(self):
        return len(self.params)

    def get_parameter(self, index):
        return self.params[index]

    def get_part_count(self):
        return len(self.parts)

    def get_part_id(self, index):
        return self.parts[index]

    def set_part_opacity(self, index, opacity):
        self._record("set_part_opacity", index, opacity)

    def hit_part(self, x, y, top_only):
        self._record("hit_part", x, y, top_only)
        return self.parts[:1] if top_only else list(self.parts)

    def set_part_multiply_color(self, index, r, g, b, a):
        self._record("set_part_multiply_color", index, r, g, b, a)
        self.multiply[index] = (r, g, b, a)

    def get_part_multiply_color(self, index):
        return self.multiply[index]

    def set_part_screen_color(self, index, r, g, b, a):
        self._record("set_part_screen_color", index, r, g, b, a)
        self.screen[index] = (r, g, b, a)

    def get_part_screen_color(self, index):
        return self.screen[index]

    def release(self):
        self._record("release")
        self.released = True


class FakeFramework:
    name = "fake"

    def __init__(self):
        self.calls = []
        self.models = []
        self.log_function = None

    def startup(self, log_function, log_level):
        self.calls.append(("startup", log_level))
        self.log_function = log_function

    def shutdown(self):
        self.calls.append(("shutdown",))

    def gl_init(self):
        self.calls.append(("gl_init",))

    def gl_release(self):
        self.calls.append(("gl_release",))

    def clear_buffer(self, r, g, b, a):
        self.calls.append(("clear_buffer", r, g, b, a))

    def set_log_enable(self, enable):
        self.calls.append(("set_log_enable", enable))

    def create_model(self):
        model = FakeNativeModel()
        self.models.append(model)
        return model


class ManualClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start_ms=0):
        self.now_ms = start_ms

    def __call__(self):
        return self.now_ms

    def set(self, ms):
        self.now_ms = ms

    def advance(self, ms):
        self.now_ms += ms


@pytest.fixture
def temp_dir():
    """创建临时目录 fixture"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def native():
    return FakeNativeModel()


@pytest.fixture
def model(native, clock):
    m = Model(native, clock=clock)
    yield m
    m.dispose()


@pytest.fixture
def backend_factory():
    """返回假后端类，供需要自行启动框架的测试使用"""
    return FakeFramework


@pytest.fixture
def fake_framework():
    """以假后端启动框架，测试结束后关闭并恢复日志开关"""
    backend = FakeFramework()
    framework.init(Settings(), backend=backend)
    yield backend
    framework.dispose()
    framework.set_log_enable(True)


@pytest.fixture
def log_records():
    """捕获 loguru 日志记录（record dict 列表）"""
    records = []
    sink_id = loguru_logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    loguru_logger.remove(sink_id)


@pytest.fixture(autouse=True)
def reset_framework_state(monkeypatch, tmp_path):
    """每个测试前后重置框架状态与配置缓存"""
    monkeypatch.setenv("CUBISMPY_CONFIG_DIR", str(tmp_path))
    clear_settings_cache()
    yield
    framework.dispose()
    framework.set_log_enable(True)
    clear_settings_cache()


# pytest 配置
def pytest_configure(config):
    """pytest 配置钩子"""
    config.addinivalue_line("markers", "gui: 需要 PyQt6 的测试")
